import logging
import time

from ipns.config import (
    DEFAULT_RECORD_CONFIG,
    RecordConfig,
)
from ipns.crypto.keys import (
    PrivateKey,
)
from ipns.identity import (
    identity_from_public_key,
)
from ipns.record import (
    codec,
)
from ipns.record.codec import (
    MAX_UINT64,
)
from ipns.record.errors import (
    SigningFailedError,
)
from ipns.record.model import (
    IpnsRecord,
    ValidityType,
    legacy_signature_payload,
    modern_signature_payload,
)
from ipns.record.timestamp import (
    format_rfc3339_nano,
    parse_rfc3339_nano,
)

logger = logging.getLogger(__name__)


def create(
    private_key: PrivateKey,
    value: bytes | str,
    sequence: int,
    lifetime_ns: int,
    *,
    ttl_ns: int | None = None,
    v1_compatible: bool | None = None,
    now_ns: int | None = None,
    config: RecordConfig = DEFAULT_RECORD_CONFIG,
) -> IpnsRecord:
    """
    Create a signed record pointing at ``value`` that stays valid for
    ``lifetime_ns`` nanoseconds from ``now_ns`` (the current time by default).

    ``signatureV2`` is always produced. With ``v1_compatible`` (the
    configured default is on) the legacy ``signatureV1`` is added for
    consumers that predate V2. Keys that cannot be inlined in the peer ID,
    such as RSA keys, are embedded in ``pubKey``.

    :raises ValueError: for a negative sequence, lifetime or ttl
    :raises SigningFailedError: if ``private_key`` fails to sign
    """
    _check_uint64("lifetime_ns", lifetime_ns)
    if now_ns is None:
        now_ns = time.time_ns()
    validity = format_rfc3339_nano(now_ns + lifetime_ns).encode()
    return _create(
        private_key, value, sequence, validity, ttl_ns, v1_compatible, config
    )


def create_with_expiration(
    private_key: PrivateKey,
    value: bytes | str,
    sequence: int,
    expiration: bytes | str,
    *,
    ttl_ns: int | None = None,
    v1_compatible: bool | None = None,
    config: RecordConfig = DEFAULT_RECORD_CONFIG,
) -> IpnsRecord:
    """
    Same as :func:`create`, but the record expires at the absolute RFC3339
    timestamp ``expiration``, e.g. ``"2030-01-01T00:00:00.000000000Z"``.
    """
    try:
        expires_at_ns = parse_rfc3339_nano(expiration)
    except ValueError as e:
        raise ValueError(f"invalid expiration {expiration!r}") from e
    validity = format_rfc3339_nano(expires_at_ns).encode()
    return _create(
        private_key, value, sequence, validity, ttl_ns, v1_compatible, config
    )


def _create(
    private_key: PrivateKey,
    value: bytes | str,
    sequence: int,
    validity: bytes,
    ttl_ns: int | None,
    v1_compatible: bool | None,
    config: RecordConfig,
) -> IpnsRecord:
    if isinstance(value, str):
        value = value.encode("utf-8")
    if ttl_ns is None:
        ttl_ns = config.default_ttl_ns
    if v1_compatible is None:
        v1_compatible = config.v1_compatible
    _check_uint64("sequence", sequence)
    _check_uint64("ttl_ns", ttl_ns)

    validity_type = ValidityType.EOL.value
    identity = identity_from_public_key(private_key.get_public_key())

    data = codec.encode_signed_data(value, validity, validity_type, sequence, ttl_ns)
    signature_v2 = _sign(private_key, modern_signature_payload(data))

    signature_v1 = None
    if v1_compatible:
        signature_v1 = _sign(
            private_key, legacy_signature_payload(value, validity, validity_type)
        )

    logger.debug(
        "created IPNS record for %s (sequence=%d, v1=%s)",
        identity.peer_id,
        sequence,
        v1_compatible,
    )
    return IpnsRecord(
        value=value,
        validity=validity,
        sequence=sequence,
        ttl=ttl_ns,
        validity_type=validity_type,
        pub_key=identity.embedded_key(),
        signature_v1=signature_v1,
        signature_v2=signature_v2,
        data=data,
    )


def _sign(private_key: PrivateKey, payload: bytes) -> bytes:
    try:
        return private_key.sign(payload)
    except Exception as e:
        raise SigningFailedError(f"failed to sign record: {e}") from e


def _check_uint64(name: str, number: int) -> None:
    if not isinstance(number, int) or isinstance(number, bool):
        raise ValueError(f"{name} must be an integer")
    if not 0 <= number <= MAX_UINT64:
        raise ValueError(f"{name} must be between 0 and {MAX_UINT64}")

"""
Validation of untrusted IPNS records.

:func:`validate` is the trust boundary: a record's value may only be used
after it returns. Checks run in a fixed order and the first failure wins:

1. size limit, before any parsing
2. envelope decoding
3. public key resolution against the claimed routing key
4. signature verification (V2 when present, otherwise legacy V1)
5. expiration
"""

from collections.abc import (
    Callable,
)
import logging

from ipns.config import (
    DEFAULT_RECORD_CONFIG,
    RecordConfig,
)
from ipns.crypto.keys import (
    PublicKey,
)
from ipns.identity import (
    identity_from_routing_key,
)
from ipns.record.errors import (
    InvalidRecordDataError,
    InvalidRoutingKeyError,
    RecordExpiredError,
    RecordTooLargeError,
    SignatureVerificationError,
)
from ipns.record.model import (
    MAX_RECORD_SIZE,
    IpnsRecord,
    SignatureVersion,
    is_expired,
    legacy_signature_payload,
    modern_signature_payload,
    signature_version,
    signed_data_for,
    unmarshal,
)
from ipns.record.utils import (
    split_key,
)

logger = logging.getLogger(__name__)


def _verify_v2(record: IpnsRecord, public_key: PublicKey) -> None:
    data = record.data or b""
    if signed_data_for(record) != data:
        raise SignatureVerificationError("record fields do not match signed data")
    signature = record.signature_v2 or b""
    if not public_key.verify(modern_signature_payload(data), signature):
        raise SignatureVerificationError("signatureV2 verification failed")


def _verify_v1(record: IpnsRecord, public_key: PublicKey) -> None:
    payload = legacy_signature_payload(
        record.value, record.validity, record.validity_type
    )
    if not public_key.verify(payload, record.signature_v1 or b""):
        raise SignatureVerificationError("signatureV1 verification failed")


_VERIFIERS: dict[SignatureVersion, Callable[[IpnsRecord, PublicKey], None]] = {
    SignatureVersion.V2: _verify_v2,
    SignatureVersion.V1: _verify_v1,
}


def verify_signature(record: IpnsRecord, public_key: PublicKey) -> None:
    """
    Check the authoritative signature of ``record`` against ``public_key``.

    Once ``signatureV2`` verifies, ``signatureV1`` is not looked at.

    :raises SignatureVerificationError: if the record is unsigned, carries
        an incomplete V2 signature or its signature does not verify
    """
    version = signature_version(record)
    if version is None:
        raise SignatureVerificationError("record carries no usable signature")
    _VERIFIERS[version](record, public_key)


def validate(
    key: bytes,
    value: bytes,
    *,
    now_ns: int | None = None,
    max_record_size: int = MAX_RECORD_SIZE,
) -> None:
    """
    Validate the marshaled record ``value`` stored under routing key ``key``.

    Returns ``None`` on success. Any failure raises an :class:`IpnsError`
    subclass and the record must then be treated as wholly untrusted.

    :raises RecordTooLargeError: if ``value`` exceeds ``max_record_size``
    :raises InvalidRecordDataError: if ``value`` cannot be decoded
    :raises InvalidRoutingKeyError: if ``key`` is not an IPNS routing key
    :raises InvalidEmbeddedKeyError: if the signing key cannot be tied to ``key``
    :raises SignatureVerificationError: if the signature does not verify
    :raises RecordExpiredError: if the record is past its validity
    :raises UnsupportedValidityTypeError: for an unknown validity type
    """
    if len(value) > max_record_size:
        raise RecordTooLargeError(
            f"record exceeds size limit: {len(value)} > {max_record_size}"
        )

    record = unmarshal(value)
    public_key = identity_from_routing_key(key).resolve_public_key(record.pub_key)
    verify_signature(record, public_key)

    if is_expired(record, now_ns):
        raise RecordExpiredError("record has expired")

    logger.debug("IPNS record validated (sequence=%d)", record.sequence)


def select(key: bytes, values: list[bytes]) -> int:
    """
    Return the index of the freshest record among ``values``.

    The highest sequence number wins, then the latest expiration. On a full
    tie the earliest candidate is kept. Candidates are decoded but not
    validated; the ones that cannot be decoded are skipped.

    :raises ValueError: if ``values`` is empty
    :raises InvalidRecordDataError: if no candidate can be decoded
    """
    if not values:
        raise ValueError("Cannot select from empty value list")

    best_idx: int | None = None
    best: tuple[int, int] | None = None

    for i, value in enumerate(values):
        try:
            record = unmarshal(value)
            rank = (record.sequence, record.expires_at_ns())
        except InvalidRecordDataError as e:
            logger.debug("Skipping undecodable record %d during selection: %s", i, e)
            continue

        if best is None or rank > best:
            best_idx, best = i, rank

    if best_idx is None:
        raise InvalidRecordDataError("no candidate record could be decoded")
    return best_idx


class Validator:
    """Base class for all validators"""

    def validate(self, key: bytes, value: bytes) -> None:
        raise NotImplementedError

    def select(self, key: bytes, values: list[bytes]) -> int:
        raise NotImplementedError


class IPNSValidator(Validator):
    """
    Record validator for the ``/ipns/`` namespace, pluggable into a
    :class:`NamespacedValidator`.
    """

    def __init__(self, config: RecordConfig = DEFAULT_RECORD_CONFIG) -> None:
        self._config = config

    def validate(self, key: bytes, value: bytes) -> None:
        validate(key, value, max_record_size=self._config.max_record_size)

    def select(self, key: bytes, values: list[bytes]) -> int:
        return select(key, values)


class NamespacedValidator:
    """
    Manages a collection of validators, each associated with a specific namespace.
    """

    def __init__(self, validators: dict[str, Validator]):
        self._validators = validators

    def validator_by_key(self, key: bytes) -> Validator | None:
        """
        Retrieve the validator responsible for the given key's namespace.

        Args:
            key (bytes): A namespaced key in the form ``/namespace/value``.

        Returns:
            Optional[Validator]: The matching validator, or None if not found.

        """
        try:
            ns, _ = split_key(key)
        except InvalidRoutingKeyError:
            return None
        return self._validators.get(ns)

    def validate(self, key: bytes, value: bytes) -> None:
        """
        Validate a key-value pair using the appropriate namespaced validator.

        Raises:
            InvalidRoutingKeyError: If no matching validator is found.
            IpnsError: Propagated from the sub-validator.

        """
        validator = self.validator_by_key(key)
        if validator is None:
            raise InvalidRoutingKeyError("invalid record keytype")
        validator.validate(key, value)

    def select(self, key: bytes, values: list[bytes]) -> int:
        """
        Choose the best value from a list using the namespaced validator.

        Raises:
            ValueError: If the values list is empty.
            InvalidRoutingKeyError: If no matching validator is found.

        """
        if not values:
            raise ValueError("Can't select from empty value list")
        validator = self.validator_by_key(key)
        if validator is None:
            raise InvalidRoutingKeyError("invalid record keytype")
        return validator.select(key, values)


def default_validator(
    config: RecordConfig = DEFAULT_RECORD_CONFIG,
) -> NamespacedValidator:
    return NamespacedValidator({"ipns": IPNSValidator(config)})



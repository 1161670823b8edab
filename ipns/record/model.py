"""
The in-memory IPNS record and the pure helpers built around it.

An :class:`IpnsRecord` never travels between producer and consumer as an
object: the builder returns one, :func:`marshal` turns it into bytes and
the consumer rebuilds its own copy with :func:`unmarshal`.
"""

from collections.abc import (
    Callable,
)
from dataclasses import (
    dataclass,
)
from enum import (
    Enum,
    unique,
)
import time

from ipns.peer.id import (
    ID,
)
from ipns.record import (
    codec,
)
from ipns.record.errors import (
    InvalidRecordDataError,
    UnsupportedValidityTypeError,
)
from ipns.record.pb.ipns_pb2 import (
    IpnsEntry,
)
from ipns.record.timestamp import (
    parse_rfc3339_nano,
)

# IPNS record spec constants: https://specs.ipfs.tech/ipns/ipns-record/
MAX_RECORD_SIZE = 1024 * 1024
SIGNATURE_PREFIX = b"ipns-signature:"
ROUTING_KEY_PREFIX = b"/ipns/"


@unique
class ValidityType(Enum):
    EOL = IpnsEntry.ValidityType.EOL


@unique
class SignatureVersion(Enum):
    V1 = 1
    V2 = 2


@dataclass(frozen=True)
class IpnsRecord:
    value: bytes
    validity: bytes
    sequence: int
    ttl: int
    validity_type: int = ValidityType.EOL.value
    pub_key: bytes | None = None
    signature_v1: bytes | None = None
    signature_v2: bytes | None = None
    data: bytes | None = None

    def expires_at_ns(self) -> int:
        try:
            return parse_rfc3339_nano(self.validity)
        except ValueError as e:
            raise InvalidRecordDataError("record validity is not a timestamp") from e


def to_validity_type(validity_type: int) -> ValidityType:
    try:
        return ValidityType(validity_type)
    except ValueError as e:
        raise UnsupportedValidityTypeError(
            f"unsupported validity type {validity_type}"
        ) from e


def legacy_signature_payload(
    value: bytes, validity: bytes, validity_type: int
) -> bytes:
    """
    Build the message signed by ``signatureV1``: value, validity and the
    validity type name, concatenated without delimiters.
    """
    tag = to_validity_type(validity_type).name.encode()
    return value + validity + tag


def modern_signature_payload(data: bytes) -> bytes:
    """Build the message signed by ``signatureV2`` from the CBOR ``data``."""
    return SIGNATURE_PREFIX + data


def build_modern_payload(
    value: bytes, validity: bytes, validity_type: int, sequence: int, ttl: int
) -> bytes:
    return modern_signature_payload(
        codec.encode_signed_data(value, validity, validity_type, sequence, ttl)
    )


def signed_data_for(record: IpnsRecord) -> bytes:
    """Re-encode the record's top-level fields the way ``data`` encodes them."""
    return codec.encode_signed_data(
        record.value,
        record.validity,
        record.validity_type,
        record.sequence,
        record.ttl,
    )


def signature_version(record: IpnsRecord) -> SignatureVersion | None:
    """
    Pick the signature that authenticates ``record``.

    V2 wins whenever both ``signatureV2`` and ``data`` are present. V1 is
    only used for legacy records carrying no V2 field at all; anything in
    between has no usable signature.
    """
    if record.signature_v2 is not None and record.data is not None:
        return SignatureVersion.V2
    if (
        record.signature_v1 is not None
        and record.signature_v2 is None
        and record.data is None
    ):
        return SignatureVersion.V1
    return None


def routing_key_for(peer_id: ID) -> bytes:
    return ROUTING_KEY_PREFIX + peer_id.to_bytes()


def _eol_expired(record: IpnsRecord, now_ns: int) -> bool:
    return now_ns > record.expires_at_ns()


_EXPIRATION_CHECKS: dict[ValidityType, Callable[[IpnsRecord, int], bool]] = {
    ValidityType.EOL: _eol_expired,
}


def is_expired(record: IpnsRecord, now_ns: int | None = None) -> bool:
    """
    Return whether ``record`` is no longer valid at ``now_ns`` (nanoseconds
    since the epoch, defaults to the current time).

    :raises UnsupportedValidityTypeError: for an unknown validity type
    :raises InvalidRecordDataError: if the validity cannot be interpreted
    """
    if now_ns is None:
        now_ns = time.time_ns()
    check = _EXPIRATION_CHECKS[to_validity_type(record.validity_type)]
    return check(record, now_ns)


def marshal(record: IpnsRecord) -> bytes:
    to_validity_type(record.validity_type)
    return codec.encode_entry(
        value=record.value,
        signatureV1=record.signature_v1,
        validityType=record.validity_type,
        validity=record.validity,
        sequence=record.sequence,
        ttl=record.ttl,
        pubKey=record.pub_key,
        signatureV2=record.signature_v2,
        data=record.data,
    )


def unmarshal(data: bytes) -> IpnsRecord:
    """
    Decode an envelope without verifying it.

    Top-level fields missing from the envelope are taken from the signed
    ``data`` so V2-only envelopes that omit them are still readable; fields
    present on the wire are kept as they are.

    :raises InvalidRecordDataError: if the envelope or its ``data`` is malformed
    """
    entry = codec.decode_entry(data)
    signed = codec.decode_signed_data(entry["data"]) if "data" in entry else {}

    def pick(name: str, signed_name: str, default: bytes | int) -> bytes | int:
        if name in entry:
            return entry[name]
        return signed.get(signed_name, default)

    return IpnsRecord(
        value=pick("value", "Value", b""),
        validity=pick("validity", "Validity", b""),
        sequence=pick("sequence", "Sequence", 0),
        ttl=pick("ttl", "TTL", 0),
        validity_type=pick("validityType", "ValidityType", ValidityType.EOL.value),
        pub_key=entry.get("pubKey"),
        signature_v1=entry.get("signatureV1"),
        signature_v2=entry.get("signatureV2"),
        data=entry.get("data"),
    )

"""
Wire codecs for IPNS records.

Two encodings meet here: the protobuf ``IpnsEntry`` envelope that travels
over the network, and the DAG-CBOR map stored in its ``data`` field, which
is the exact byte string covered by ``signatureV2``.
"""

from typing import (
    Any,
)

import cbor2
from google.protobuf import (
    unknown_fields,
)
from google.protobuf.message import (
    DecodeError,
)

from ipns.record.errors import (
    InvalidRecordDataError,
)
from ipns.record.pb.ipns_pb2 import (
    IpnsEntry,
)

ENTRY_FIELDS = (
    "value",
    "signatureV1",
    "validityType",
    "validity",
    "sequence",
    "ttl",
    "pubKey",
    "signatureV2",
    "data",
)

MAX_UINT64 = 2**64 - 1

_VALIDITY_TYPE_FIELD = IpnsEntry.DESCRIPTOR.fields_by_name["validityType"]
_WIRETYPE_VARINT = 0


def encode_signed_data(
    value: bytes, validity: bytes, validity_type: int, sequence: int, ttl: int
) -> bytes:
    """
    Encode the signed field set as DAG-CBOR.

    ``Validity`` is the same RFC3339 byte string as the envelope field, not
    a number, so the bytes match what go-ipns and js-ipns sign.

    DAG-CBOR orders map keys by encoded length, then bytewise, which is
    what cbor2's canonical mode does for text keys. Integers are always
    encoded in their shortest form, so equal fields give equal bytes.
    """
    return cbor2.dumps(
        {
            "Value": value,
            "Validity": validity,
            "ValidityType": validity_type,
            "Sequence": sequence,
            "TTL": ttl,
        },
        canonical=True,
    )


def decode_signed_data(data: bytes) -> dict[str, Any]:
    """
    Decode the ``data`` field of an entry.

    :raises InvalidRecordDataError: if ``data`` is not a CBOR map holding
        every signed field with the expected type
    """
    try:
        fields = cbor2.loads(data)
    except (cbor2.CBORDecodeError, ValueError, TypeError) as e:
        raise InvalidRecordDataError("signed data is not valid CBOR") from e

    if not isinstance(fields, dict):
        raise InvalidRecordDataError("signed data is not a CBOR map")

    for name in ("Value", "Validity"):
        if not isinstance(fields.get(name), bytes):
            raise InvalidRecordDataError(f"signed data has no byte string {name}")
    for name in ("ValidityType", "Sequence", "TTL"):
        number = fields.get(name)
        if (
            not isinstance(number, int)
            or isinstance(number, bool)
            or not 0 <= number <= MAX_UINT64
        ):
            raise InvalidRecordDataError(f"signed data has no unsigned integer {name}")
    return fields


def encode_entry(**fields: Any) -> bytes:
    """
    Serialize an ``IpnsEntry``. Fields passed as ``None`` are left unset so
    the envelope only carries what the record actually holds.
    """
    entry = IpnsEntry()
    for name, field_value in fields.items():
        if name not in ENTRY_FIELDS:
            raise TypeError(f"IpnsEntry has no field {name!r}")
        if field_value is not None:
            setattr(entry, name, field_value)
    return entry.SerializeToString()


def decode_entry(data: bytes) -> dict[str, Any]:
    """
    Parse an ``IpnsEntry`` and return only the fields present on the wire.

    ``validityType`` is a closed enum, so protobuf parks values it does not
    know among the unknown fields. They are returned as plain integers so
    that callers reject them instead of reading the EOL default.

    :raises InvalidRecordDataError: if ``data`` is not a valid envelope
    """
    try:
        entry = IpnsEntry.FromString(data)
    except DecodeError as e:
        raise InvalidRecordDataError("record is not a valid IpnsEntry") from e
    fields = {
        name: getattr(entry, name) for name in ENTRY_FIELDS if entry.HasField(name)
    }
    for field in unknown_fields.UnknownFieldSet(entry):
        if (
            field.field_number == _VALIDITY_TYPE_FIELD.number
            and field.wire_type == _WIRETYPE_VARINT
        ):
            fields["validityType"] = field.data
    return fields

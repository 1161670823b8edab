import dataclasses
import os

import pytest

from ipns.crypto.ed25519 import create_new_key_pair as create_ed25519_key_pair
from ipns.peer.id import ID
from ipns.record.builder import create
from ipns.record.codec import encode_entry
from ipns.record.errors import (
    ErrorKind,
    InvalidEmbeddedKeyError,
    InvalidRecordDataError,
    InvalidRoutingKeyError,
    RecordExpiredError,
    RecordTooLargeError,
    SignatureVerificationError,
    UnsupportedValidityTypeError,
)
from ipns.record.model import (
    MAX_RECORD_SIZE,
    IpnsRecord,
    legacy_signature_payload,
    marshal,
    modern_signature_payload,
    routing_key_for,
    signed_data_for,
)
from ipns.record.validator import validate

CONTENT_PATH = "/ipfs/bafkqae3imvwgy3zamzzg63janjzs22lqnzzqu"
NOW_NS = 1_700_000_000_000_000_000
LIFETIME_NS = 1_000_000


def _routing_key(key_pair) -> bytes:
    return routing_key_for(ID.from_pubkey(key_pair.public_key))


def _create(key_pair, **kwargs) -> IpnsRecord:
    return create(
        key_pair.private_key, CONTENT_PATH, 0, LIFETIME_NS, now_ns=NOW_NS, **kwargs
    )


def _validate(key: bytes, value: bytes) -> None:
    validate(key, value, now_ns=NOW_NS)


class TestValidRecords:
    @pytest.mark.parametrize("v1_compatible", [True, False])
    def test_rsa_record(self, rsa_key_pair, v1_compatible):
        record = _create(rsa_key_pair, v1_compatible=v1_compatible)
        _validate(_routing_key(rsa_key_pair), marshal(record))

    @pytest.mark.parametrize("v1_compatible", [True, False])
    def test_ed25519_record(self, ed25519_key_pair, v1_compatible):
        record = _create(ed25519_key_pair, v1_compatible=v1_compatible)
        _validate(_routing_key(ed25519_key_pair), marshal(record))

    def test_secp256k1_record(self, secp256k1_key_pair):
        record = _create(secp256k1_key_pair)
        _validate(_routing_key(secp256k1_key_pair), marshal(record))

    def test_validates_with_current_time(self, ed25519_key_pair):
        record = create(ed25519_key_pair.private_key, CONTENT_PATH, 5, 60 * 10**9)
        validate(_routing_key(ed25519_key_pair), marshal(record))

    def test_v2_envelope_without_top_level_fields(self, ed25519_key_pair):
        record = _create(ed25519_key_pair, v1_compatible=False)
        envelope = encode_entry(signatureV2=record.signature_v2, data=record.data)

        _validate(_routing_key(ed25519_key_pair), envelope)

    def test_legacy_v1_only_record(self, ed25519_key_pair):
        record = _create(ed25519_key_pair)
        legacy = dataclasses.replace(record, signature_v2=None, data=None)

        _validate(_routing_key(ed25519_key_pair), marshal(legacy))

    def test_broken_v1_signature_is_ignored_when_v2_verifies(self, ed25519_key_pair):
        record = dataclasses.replace(_create(ed25519_key_pair), signature_v1=b"junk")
        _validate(_routing_key(ed25519_key_pair), marshal(record))

    def test_ed25519_record_with_matching_embedded_key(self, ed25519_key_pair):
        record = dataclasses.replace(
            _create(ed25519_key_pair), pub_key=ed25519_key_pair.public_key.serialize()
        )
        _validate(_routing_key(ed25519_key_pair), marshal(record))


class TestTamperDetection:
    @pytest.mark.parametrize("v1_compatible", [True, False])
    def test_value_replaced_with_random_bytes(self, rsa_key_pair, v1_compatible):
        record = _create(rsa_key_pair, v1_compatible=v1_compatible)
        tampered = dataclasses.replace(record, value=os.urandom(len(record.value)))

        with pytest.raises(SignatureVerificationError) as excinfo:
            _validate(_routing_key(rsa_key_pair), marshal(tampered))
        assert excinfo.value.code == "ERR_SIGNATURE_VERIFICATION"

    @pytest.mark.parametrize(
        "field, replacement",
        [
            ("sequence", 1),
            ("ttl", 1),
            ("validity", b"2999-01-01T00:00:00.000000000Z"),
        ],
    )
    def test_top_level_field_diverging_from_signed_data(
        self, ed25519_key_pair, field, replacement
    ):
        record = dataclasses.replace(
            _create(ed25519_key_pair), **{field: replacement}
        )

        with pytest.raises(SignatureVerificationError, match="do not match"):
            _validate(_routing_key(ed25519_key_pair), marshal(record))

    def test_corrupted_v2_signature(self, ed25519_key_pair):
        record = dataclasses.replace(
            _create(ed25519_key_pair), signature_v2=b"\x00" * 64
        )

        with pytest.raises(SignatureVerificationError, match="signatureV2"):
            _validate(_routing_key(ed25519_key_pair), marshal(record))

    def test_v1_only_record_with_tampered_value(self, ed25519_key_pair):
        record = _create(ed25519_key_pair)
        legacy = dataclasses.replace(
            record, signature_v2=None, data=None, value=b"/ipfs/evil"
        )

        with pytest.raises(SignatureVerificationError, match="signatureV1"):
            _validate(_routing_key(ed25519_key_pair), marshal(legacy))

    def test_v1_signature_cannot_stand_in_for_incomplete_v2(self, ed25519_key_pair):
        record = dataclasses.replace(_create(ed25519_key_pair), data=None)

        with pytest.raises(SignatureVerificationError, match="no usable signature"):
            _validate(_routing_key(ed25519_key_pair), marshal(record))

    def test_unsigned_record(self, ed25519_key_pair):
        record = dataclasses.replace(
            _create(ed25519_key_pair), signature_v1=None, signature_v2=None, data=None
        )

        with pytest.raises(SignatureVerificationError):
            _validate(_routing_key(ed25519_key_pair), marshal(record))

    def test_unknown_validity_type_in_signed_data(self, ed25519_key_pair):
        key_pair = ed25519_key_pair
        record = _create(key_pair, v1_compatible=False)
        unsupported = dataclasses.replace(record, validity_type=1)
        data = signed_data_for(unsupported)
        signature = key_pair.private_key.sign(modern_signature_payload(data))
        envelope = encode_entry(signatureV2=signature, data=data)

        with pytest.raises(UnsupportedValidityTypeError):
            _validate(_routing_key(key_pair), envelope)


class TestKeyResolution:
    def test_wrong_rsa_routing_key(self, rsa_key_pair, other_rsa_key_pair):
        record = _create(rsa_key_pair)

        with pytest.raises(InvalidEmbeddedKeyError) as excinfo:
            _validate(_routing_key(other_rsa_key_pair), marshal(record))
        assert excinfo.value.kind is ErrorKind.INVALID_EMBEDDED_KEY

    def test_wrong_ed25519_routing_key(
        self, ed25519_key_pair, other_ed25519_key_pair
    ):
        record = _create(ed25519_key_pair)

        with pytest.raises(SignatureVerificationError):
            _validate(_routing_key(other_ed25519_key_pair), marshal(record))

    def test_wrong_rsa_key_embedded(self, rsa_key_pair, other_rsa_key_pair):
        record = dataclasses.replace(
            _create(rsa_key_pair), pub_key=other_rsa_key_pair.public_key.serialize()
        )

        with pytest.raises(InvalidEmbeddedKeyError):
            _validate(_routing_key(rsa_key_pair), marshal(record))

    def test_wrong_key_embedded_in_ed25519_record(self, ed25519_key_pair):
        other = create_ed25519_key_pair()
        record = dataclasses.replace(
            _create(ed25519_key_pair), pub_key=other.public_key.serialize()
        )

        with pytest.raises(InvalidEmbeddedKeyError):
            _validate(_routing_key(ed25519_key_pair), marshal(record))

    def test_rsa_record_without_embedded_key(self, rsa_key_pair):
        record = dataclasses.replace(_create(rsa_key_pair), pub_key=None)

        with pytest.raises(InvalidEmbeddedKeyError):
            _validate(_routing_key(rsa_key_pair), marshal(record))

    def test_undecodable_embedded_key(self, rsa_key_pair):
        record = dataclasses.replace(_create(rsa_key_pair), pub_key=b"\x08\x00\x12")

        with pytest.raises(InvalidEmbeddedKeyError, match="malformed"):
            _validate(_routing_key(rsa_key_pair), marshal(record))

    @pytest.mark.parametrize("key", [b"", b"/pk/abc", b"/ipns/", b"/ipns/\x12\x20abc"])
    def test_invalid_routing_key(self, ed25519_key_pair, key):
        record = _create(ed25519_key_pair)

        with pytest.raises(InvalidRoutingKeyError):
            _validate(key, marshal(record))


class TestSizeLimit:
    def test_rejects_records_over_limit_before_decoding(self):
        with pytest.raises(RecordTooLargeError) as excinfo:
            validate(b"", b"\x00" * (MAX_RECORD_SIZE + 1))
        assert excinfo.value.code == "ERR_RECORD_TOO_LARGE"

    def test_record_at_limit_is_decoded(self, ed25519_key_pair):
        with pytest.raises(InvalidRecordDataError):
            validate(_routing_key(ed25519_key_pair), b"\xff" * MAX_RECORD_SIZE)

    def test_custom_limit(self, ed25519_key_pair):
        value = marshal(_create(ed25519_key_pair))

        with pytest.raises(RecordTooLargeError):
            validate(_routing_key(ed25519_key_pair), value, max_record_size=10)


class TestExpiration:
    def test_expired_record_with_valid_signature(self, rsa_key_pair):
        record = _create(rsa_key_pair)

        with pytest.raises(RecordExpiredError) as excinfo:
            validate(
                _routing_key(rsa_key_pair),
                marshal(record),
                now_ns=NOW_NS + 2 * LIFETIME_NS,
            )
        assert excinfo.value.code == "ERR_IPNS_EXPIRED_RECORD"

    def test_signature_is_checked_before_expiration(self, ed25519_key_pair):
        record = dataclasses.replace(_create(ed25519_key_pair), signature_v2=b"x")

        with pytest.raises(SignatureVerificationError):
            validate(
                _routing_key(ed25519_key_pair),
                marshal(record),
                now_ns=NOW_NS + 2 * LIFETIME_NS,
            )


def test_create_then_validate_scenario(rsa_key_pair):
    record = create(
        rsa_key_pair.private_key, CONTENT_PATH, 0, 1_000_000, now_ns=NOW_NS
    )
    key = _routing_key(rsa_key_pair)

    _validate(key, marshal(record))

    corrupted = dataclasses.replace(record, value=os.urandom(len(record.value)))
    with pytest.raises(SignatureVerificationError):
        _validate(key, marshal(corrupted))


def test_legacy_payload_signature_round_trip(ed25519_key_pair):
    record = _create(ed25519_key_pair)
    payload = legacy_signature_payload(
        record.value, record.validity, record.validity_type
    )
    assert ed25519_key_pair.public_key.verify(payload, record.signature_v1)


class TestValidityEdgeCases:
    @pytest.mark.parametrize(
        "validity",
        [b"9999-12-31T23:59:59.000000000-23:59", b"0001-01-01T00:00:00+01:00"],
    )
    def test_signed_validity_outside_datetime_range(self, ed25519_key_pair, validity):
        key_pair = ed25519_key_pair
        unsigned = dataclasses.replace(
            _create(key_pair, v1_compatible=False), validity=validity
        )
        data = signed_data_for(unsigned)
        signature = key_pair.private_key.sign(modern_signature_payload(data))
        record = dataclasses.replace(unsigned, data=data, signature_v2=signature)

        with pytest.raises(InvalidRecordDataError):
            _validate(_routing_key(key_pair), marshal(record))

    def test_unknown_wire_validity_type_on_v1_only_record(self, ed25519_key_pair):
        record = _create(ed25519_key_pair)
        envelope = encode_entry(
            value=record.value,
            signatureV1=record.signature_v1,
            validity=record.validity,
            sequence=record.sequence,
            ttl=record.ttl,
        )
        # validityType = 1, which the closed enum does not know
        envelope += b"\x18\x01"

        with pytest.raises(UnsupportedValidityTypeError):
            _validate(_routing_key(ed25519_key_pair), envelope)

"""
Key types and interfaces.

Records are signed and verified exclusively through these interfaces; the
record layer never touches a concrete key implementation.
"""

from abc import (
    ABC,
    abstractmethod,
)
from dataclasses import (
    dataclass,
)
from enum import (
    Enum,
    unique,
)

from ipns.crypto.pb import (
    crypto_pb2,
)


@unique
class KeyType(Enum):
    RSA = crypto_pb2.KeyType.RSA
    Ed25519 = crypto_pb2.KeyType.Ed25519
    Secp256k1 = crypto_pb2.KeyType.Secp256k1


class Key(ABC):
    """A ``Key`` represents a cryptographic key."""

    @abstractmethod
    def to_bytes(self) -> bytes:
        """Returns the raw byte representation of this key."""
        ...

    @abstractmethod
    def get_type(self) -> KeyType:
        """Returns the ``KeyType`` for ``self``."""
        ...

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return self.get_type() == other.get_type() and (
            self.to_bytes() == other.to_bytes()
        )


class PublicKey(Key):
    """A ``PublicKey`` can check signatures made by its private half."""

    @abstractmethod
    def verify(self, data: bytes, signature: bytes) -> bool:
        """
        Return ``True`` iff ``signature`` is a valid signature of ``data``.

        Implementations never raise on a malformed signature; they report it
        as a failed verification.
        """
        ...

    def _serialize_to_protobuf(self) -> crypto_pb2.PublicKey:
        return crypto_pb2.PublicKey(
            key_type=self.get_type().value, data=self.to_bytes()
        )

    def serialize(self) -> bytes:
        """
        Return the canonical serialization of this ``Key``.

        These bytes are what a peer ID hashes and what a record embeds in
        its ``pubKey`` field.
        """
        return self._serialize_to_protobuf().SerializeToString()

    @classmethod
    def deserialize_from_protobuf(cls, protobuf_data: bytes) -> crypto_pb2.PublicKey:
        return crypto_pb2.PublicKey.FromString(protobuf_data)


class PrivateKey(Key):
    """A ``PrivateKey`` is the signing capability handed to the record builder."""

    @abstractmethod
    def sign(self, data: bytes) -> bytes: ...

    @abstractmethod
    def get_public_key(self) -> PublicKey: ...

    def _serialize_to_protobuf(self) -> crypto_pb2.PrivateKey:
        return crypto_pb2.PrivateKey(
            key_type=self.get_type().value, data=self.to_bytes()
        )

    def serialize(self) -> bytes:
        """Return the canonical serialization of this ``Key``."""
        return self._serialize_to_protobuf().SerializeToString()

    @classmethod
    def deserialize_from_protobuf(cls, protobuf_data: bytes) -> crypto_pb2.PrivateKey:
        return crypto_pb2.PrivateKey.FromString(protobuf_data)


@dataclass(frozen=True)
class KeyPair:
    private_key: PrivateKey
    public_key: PublicKey

"""
Identity key references.

An IPNS name is a peer ID, and a peer ID either carries its public key
(identity multihash, e.g. Ed25519) or only a hash of it (e.g. RSA). The
two cases are two trust paths:

* :class:`SelfDescribingIdentity` knows its own key and always verifies
  with it. An embedded ``pubKey`` is never used, but if a record carries
  one it still has to belong to the same name.
* :class:`OpaqueIdentity` has to take the key from the record's ``pubKey``
  field, and only after checking the key hashes back to the same name.
"""

from abc import (
    ABC,
    abstractmethod,
)

from ipns.crypto.exceptions import (
    CryptographyError,
)
from ipns.crypto.keys import (
    PublicKey,
)
from ipns.crypto.serialization import (
    deserialize_public_key,
)
from ipns.peer.id import (
    ID,
)
from ipns.record.errors import (
    InvalidEmbeddedKeyError,
    InvalidRoutingKeyError,
)
from ipns.record.model import (
    ROUTING_KEY_PREFIX,
    IpnsRecord,
    routing_key_for,
)


class Identity(ABC):
    peer_id: ID

    def __init__(self, peer_id: ID) -> None:
        self.peer_id = peer_id

    def routing_key(self) -> bytes:
        return routing_key_for(self.peer_id)

    @abstractmethod
    def embedded_key(self) -> bytes | None:
        """Bytes a producer must put in ``pubKey``, or ``None`` if none are needed."""
        ...

    @abstractmethod
    def resolve_public_key(self, embedded_key: bytes | None) -> PublicKey:
        """
        Return the key that signatures on this identity's records must
        verify against, given the record's ``pubKey`` field.

        :raises InvalidEmbeddedKeyError: if no trustworthy key can be found
        """
        ...

    def _load_embedded_key(self, embedded_key: bytes) -> PublicKey:
        try:
            public_key = deserialize_public_key(embedded_key)
        except CryptographyError as e:
            raise InvalidEmbeddedKeyError("embedded public key is malformed") from e

        if routing_key_for(ID.from_pubkey(public_key)) != self.routing_key():
            raise InvalidEmbeddedKeyError(
                "embedded public key does not match the routing key"
            )
        return public_key

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.peer_id}>"


class SelfDescribingIdentity(Identity):
    def __init__(self, peer_id: ID, public_key: PublicKey) -> None:
        super().__init__(peer_id)
        self.public_key = public_key

    def embedded_key(self) -> None:
        return None

    def resolve_public_key(self, embedded_key: bytes | None) -> PublicKey:
        if embedded_key is not None:
            self._load_embedded_key(embedded_key)
        return self.public_key


class OpaqueIdentity(Identity):
    def __init__(self, peer_id: ID, public_key: PublicKey | None = None) -> None:
        super().__init__(peer_id)
        self.public_key = public_key

    def embedded_key(self) -> bytes:
        if self.public_key is None:
            raise ValueError(f"public key of {self.peer_id} is unknown")
        return self.public_key.serialize()

    def resolve_public_key(self, embedded_key: bytes | None) -> PublicKey:
        if embedded_key is None:
            raise InvalidEmbeddedKeyError(
                "record has no embedded public key and the name does not inline one"
            )
        return self._load_embedded_key(embedded_key)


def identity_from_public_key(public_key: PublicKey) -> Identity:
    peer_id = ID.from_pubkey(public_key)
    if peer_id.is_inlined():
        return SelfDescribingIdentity(peer_id, public_key)
    return OpaqueIdentity(peer_id, public_key)


def identity_from_routing_key(key: bytes) -> Identity:
    """
    Parse ``/ipns/<peer id multihash>`` back into an identity.

    :raises InvalidRoutingKeyError: if ``key`` is outside the IPNS namespace
        or does not name a peer
    """
    if not key.startswith(ROUTING_KEY_PREFIX):
        raise InvalidRoutingKeyError("routing key is not in the /ipns/ namespace")
    try:
        peer_id = ID.from_multihash(key[len(ROUTING_KEY_PREFIX) :])
    except ValueError as e:
        raise InvalidRoutingKeyError(
            "routing key does not hold a valid multihash"
        ) from e

    try:
        public_key = peer_id.extract_public_key()
    except CryptographyError as e:
        raise InvalidRoutingKeyError(
            "routing key inlines a malformed public key"
        ) from e

    if public_key is None:
        return OpaqueIdentity(peer_id)
    return SelfDescribingIdentity(peer_id, public_key)


def extract_public_key(key: bytes, record: IpnsRecord) -> PublicKey:
    """Resolve the public key that ``record`` must be verified against."""
    return identity_from_routing_key(key).resolve_public_key(record.pub_key)

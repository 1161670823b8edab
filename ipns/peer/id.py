import base58
import multihash

from ipns.crypto.keys import (
    PublicKey,
)
from ipns.crypto.serialization import (
    deserialize_public_key,
)

# NOTE: keys whose serialization fits in MAX_INLINE_KEY_LENGTH bytes are
# inlined in the peer ID with the identity multihash, as go-libp2p and
# js-libp2p do. See: https://github.com/libp2p/specs/issues/138
MAX_INLINE_KEY_LENGTH = 42

IDENTITY_MULTIHASH_CODE = 0x00


class IdentityHash:
    _digest: bytes

    def __init__(self) -> None:
        self._digest = b""

    def update(self, input: bytes) -> None:
        self._digest += input

    def digest(self) -> bytes:
        return self._digest


multihash.FuncReg.register(
    IDENTITY_MULTIHASH_CODE, "identity", hash_new=lambda: IdentityHash()
)


class ID:
    """
    A peer identity: the multihash of a serialized public key.

    Comparing two ``ID`` values is a byte-for-byte comparison of their
    multihashes, so two distinct keys never share an ID.
    """

    _bytes: bytes
    _b58_str: str | None = None

    def __init__(self, peer_id_bytes: bytes) -> None:
        self._bytes = peer_id_bytes

    def to_bytes(self) -> bytes:
        return self._bytes

    def to_base58(self) -> str:
        if not self._b58_str:
            self._b58_str = base58.b58encode(self._bytes).decode()
        return self._b58_str

    def __repr__(self) -> str:
        return f"<ipns.peer.id.ID ({self!s})>"

    __str__ = pretty = to_string = to_base58

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            return self.to_base58() == other
        elif isinstance(other, bytes):
            return self._bytes == other
        elif isinstance(other, ID):
            return self._bytes == other._bytes
        else:
            return NotImplemented

    def __hash__(self) -> int:
        return hash(self._bytes)

    def is_inlined(self) -> bool:
        """Whether the public key is carried inside the ID itself."""
        return decode_multihash(self._bytes).func == IDENTITY_MULTIHASH_CODE

    def extract_public_key(self) -> PublicKey | None:
        """
        Return the public key inlined in this ID, or ``None`` when the ID is
        a hash of the key and the key has to be obtained elsewhere.
        """
        mh = decode_multihash(self._bytes)
        if mh.func != IDENTITY_MULTIHASH_CODE:
            return None
        return deserialize_public_key(mh.digest)

    @classmethod
    def from_base58(cls, b58_encoded_peer_id_str: str) -> "ID":
        peer_id_bytes = base58.b58decode(b58_encoded_peer_id_str)
        return cls(peer_id_bytes)

    @classmethod
    def from_multihash(cls, peer_id_bytes: bytes) -> "ID":
        """Build an ID from untrusted bytes, checking they form a multihash."""
        decode_multihash(peer_id_bytes)
        return cls(peer_id_bytes)

    @classmethod
    def from_pubkey(cls, key: PublicKey) -> "ID":
        serialized_key = key.serialize()
        algo = multihash.Func.sha2_256
        if len(serialized_key) <= MAX_INLINE_KEY_LENGTH:
            algo = IDENTITY_MULTIHASH_CODE
        mh_digest = multihash.digest(serialized_key, algo)
        return cls(mh_digest.encode())


def decode_multihash(data: bytes) -> "multihash.Multihash":
    """
    Decode ``data`` as a multihash.

    :raises ValueError: if ``data`` is not a well-formed multihash
    """
    try:
        return multihash.decode(data)
    except (IndexError, KeyError, TypeError, ValueError) as e:
        raise ValueError("invalid multihash") from e


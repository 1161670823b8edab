from Crypto.Hash import (
    SHA256,
)
import Crypto.PublicKey.RSA as RSA
from Crypto.PublicKey.RSA import (
    RsaKey,
)
from Crypto.Signature import (
    pkcs1_15,
)

from ipns.crypto.exceptions import (
    CryptographyError,
)
from ipns.crypto.keys import (
    KeyPair,
    KeyType,
    PrivateKey,
    PublicKey,
)

MIN_RSA_KEY_SIZE = 1024
MAX_RSA_KEY_SIZE = 4096


def validate_rsa_key_length(key_length: int) -> None:
    """
    Validate that the RSA key length is within the allowed bounds.

    :param key_length: RSA key size in bits.
    :raises CryptographyError:
        If the key size is below MIN_RSA_KEY_SIZE or exceeds MAX_RSA_KEY_SIZE.
    """
    if key_length <= 0:
        raise CryptographyError("RSA key size must be positive")
    if key_length < MIN_RSA_KEY_SIZE:
        raise CryptographyError(
            f"RSA key size {key_length} is below minimum size {MIN_RSA_KEY_SIZE}"
        )
    if key_length > MAX_RSA_KEY_SIZE:
        raise CryptographyError(
            f"RSA key size {key_length} exceeds maximum allowed size {MAX_RSA_KEY_SIZE}"
        )


def validate_rsa_key_size(key: RsaKey) -> None:
    validate_rsa_key_length(key.size_in_bits())


class RSAPublicKey(PublicKey):
    def __init__(self, impl: RsaKey) -> None:
        validate_rsa_key_size(impl)
        self.impl = impl

    def to_bytes(self) -> bytes:
        # PKIX (SubjectPublicKeyInfo) DER, as other libp2p implementations use
        return self.impl.export_key("DER")

    @classmethod
    def from_bytes(cls, key_bytes: bytes) -> "RSAPublicKey":
        try:
            rsakey = RSA.import_key(key_bytes)
        except (ValueError, IndexError, TypeError) as e:
            raise CryptographyError("malformed RSA public key") from e
        if rsakey.has_private():
            raise CryptographyError("expected an RSA public key")
        return cls(rsakey)

    def get_type(self) -> KeyType:
        return KeyType.RSA

    def verify(self, data: bytes, signature: bytes) -> bool:
        h = SHA256.new(data)
        try:
            pkcs1_15.new(self.impl).verify(h, signature)
        except (ValueError, TypeError):
            return False
        return True


class RSAPrivateKey(PrivateKey):
    def __init__(self, impl: RsaKey) -> None:
        validate_rsa_key_size(impl)
        self.impl = impl

    @classmethod
    def new(cls, bits: int = 2048, e: int = 65537) -> "RSAPrivateKey":
        validate_rsa_key_length(bits)
        private_key_impl = RSA.generate(bits, e=e)
        return cls(private_key_impl)

    @classmethod
    def from_bytes(cls, key_bytes: bytes) -> "RSAPrivateKey":
        try:
            rsakey = RSA.import_key(key_bytes)
        except (ValueError, IndexError, TypeError) as e:
            raise CryptographyError("malformed RSA private key") from e
        return cls(rsakey)

    def to_bytes(self) -> bytes:
        # PKCS#1 DER
        return self.impl.export_key("DER")

    def get_type(self) -> KeyType:
        return KeyType.RSA

    def sign(self, data: bytes) -> bytes:
        h = SHA256.new(data)
        return pkcs1_15.new(self.impl).sign(h)

    def get_public_key(self) -> PublicKey:
        return RSAPublicKey(self.impl.publickey())


def create_new_key_pair(bits: int = 2048, e: int = 65537) -> KeyPair:
    """
    Returns a new RSA keypair with the requested key size (``bits``) and the
    given public exponent ``e``.

    Sane defaults are provided for both values.
    """
    private_key = RSAPrivateKey.new(bits, e)
    public_key = private_key.get_public_key()
    return KeyPair(private_key, public_key)

import pytest

from ipns.crypto.ed25519 import create_new_key_pair as create_ed25519_key_pair
from ipns.crypto.rsa import create_new_key_pair as create_rsa_key_pair
from ipns.crypto.secp256k1 import create_new_key_pair as create_secp256k1_key_pair

# RSA generation is slow, so RSA identities are shared across the session.


@pytest.fixture(scope="session")
def rsa_key_pair():
    return create_rsa_key_pair(2048)


@pytest.fixture(scope="session")
def other_rsa_key_pair():
    return create_rsa_key_pair(2048)


@pytest.fixture
def ed25519_key_pair():
    return create_ed25519_key_pair()


@pytest.fixture
def other_ed25519_key_pair():
    return create_ed25519_key_pair()


@pytest.fixture
def secp256k1_key_pair():
    return create_secp256k1_key_pair()

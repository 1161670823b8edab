from ipns.exceptions import (
    BaseIpnsError,
)


class CryptographyError(BaseIpnsError):
    pass


class MissingDeserializerError(CryptographyError):
    """
    Raise if the requested deserialization routine is missing for some type
    of cryptographic key.
    """

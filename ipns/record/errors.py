"""
Failure kinds shared by the record builder and validator.

Every error carries an :class:`ErrorKind` so callers can branch on
``err.kind`` (or the stable ``err.code`` string) without parsing messages.
Messages never echo the untrusted record bytes.
"""

from enum import (
    Enum,
    unique,
)

from ipns.exceptions import (
    BaseIpnsError,
    ValidationError,
)


@unique
class ErrorKind(Enum):
    RECORD_TOO_LARGE = "ERR_RECORD_TOO_LARGE"
    INVALID_RECORD_DATA = "ERR_INVALID_RECORD_DATA"
    INVALID_ROUTING_KEY = "ERR_INVALID_ROUTING_KEY"
    INVALID_EMBEDDED_KEY = "ERR_INVALID_EMBEDDED_KEY"
    SIGNATURE_VERIFICATION = "ERR_SIGNATURE_VERIFICATION"
    RECORD_EXPIRED = "ERR_IPNS_EXPIRED_RECORD"
    UNSUPPORTED_VALIDITY_TYPE = "ERR_UNRECOGNIZED_VALIDITY"
    SIGNING_FAILED = "ERR_SIGNATURE_CREATION"


class IpnsError(BaseIpnsError):
    kind: ErrorKind

    @property
    def code(self) -> str:
        return self.kind.value


class RecordTooLargeError(IpnsError, ValidationError):
    kind = ErrorKind.RECORD_TOO_LARGE


class InvalidRecordDataError(IpnsError, ValidationError):
    kind = ErrorKind.INVALID_RECORD_DATA


class InvalidRoutingKeyError(IpnsError, ValidationError):
    kind = ErrorKind.INVALID_ROUTING_KEY


class InvalidEmbeddedKeyError(IpnsError, ValidationError):
    kind = ErrorKind.INVALID_EMBEDDED_KEY


class SignatureVerificationError(IpnsError, ValidationError):
    kind = ErrorKind.SIGNATURE_VERIFICATION


class RecordExpiredError(IpnsError, ValidationError):
    kind = ErrorKind.RECORD_EXPIRED


class UnsupportedValidityTypeError(IpnsError, ValidationError):
    kind = ErrorKind.UNSUPPORTED_VALIDITY_TYPE


class SigningFailedError(IpnsError):
    kind = ErrorKind.SIGNING_FAILED

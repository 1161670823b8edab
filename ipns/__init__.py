"""Creation, encoding and validation of IPNS records."""

from ipns.config import (
    DEFAULT_RECORD_CONFIG,
    RecordConfig,
)
from ipns.identity import (
    Identity,
    OpaqueIdentity,
    SelfDescribingIdentity,
    extract_public_key,
    identity_from_public_key,
    identity_from_routing_key,
)
from ipns.record.builder import (
    create,
    create_with_expiration,
)
from ipns.record.errors import (
    ErrorKind,
    InvalidEmbeddedKeyError,
    InvalidRecordDataError,
    InvalidRoutingKeyError,
    IpnsError,
    RecordExpiredError,
    RecordTooLargeError,
    SignatureVerificationError,
    SigningFailedError,
    UnsupportedValidityTypeError,
)
from ipns.record.model import (
    MAX_RECORD_SIZE,
    IpnsRecord,
    ValidityType,
    is_expired,
    marshal,
    routing_key_for,
    unmarshal,
)
from ipns.record.validator import (
    IPNSValidator,
    NamespacedValidator,
    Validator,
    default_validator,
    select,
    validate,
)
from ipns.utils.logging import (
    setup_logging,
)

# Initialize logging configuration
setup_logging()

__all__ = [
    "DEFAULT_RECORD_CONFIG",
    "MAX_RECORD_SIZE",
    "ErrorKind",
    "IPNSValidator",
    "Identity",
    "InvalidEmbeddedKeyError",
    "InvalidRecordDataError",
    "InvalidRoutingKeyError",
    "IpnsError",
    "IpnsRecord",
    "NamespacedValidator",
    "OpaqueIdentity",
    "RecordConfig",
    "RecordExpiredError",
    "RecordTooLargeError",
    "SelfDescribingIdentity",
    "SignatureVerificationError",
    "SigningFailedError",
    "UnsupportedValidityTypeError",
    "ValidityType",
    "Validator",
    "create",
    "create_with_expiration",
    "default_validator",
    "extract_public_key",
    "identity_from_public_key",
    "identity_from_routing_key",
    "is_expired",
    "marshal",
    "routing_key_for",
    "select",
    "unmarshal",
    "validate",
]

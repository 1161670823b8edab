class BaseIpnsError(Exception):
    pass


class ValidationError(BaseIpnsError):
    """Raised when something does not pass a validation check."""

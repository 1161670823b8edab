from ipns.record.errors import (
    InvalidRoutingKeyError,
)


def split_key(key: bytes) -> tuple[str, bytes]:
    """
    Split a record key into its namespace and the rest. The key must start
    with ``/`` and contain another ``/`` after a non-empty namespace.

    Args:
        key (bytes): The record key to split, e.g. ``b"/ipns/<peer id>"``.

    Returns:
        tuple[str, bytes]: The namespace and the remaining key bytes.

    Raises:
        InvalidRoutingKeyError: If the key has no namespace.

    """
    if not key or key[:1] != b"/":
        raise InvalidRoutingKeyError("invalid record keytype")

    key = key[1:]

    i = key.find(b"/")
    if i <= 0:
        raise InvalidRoutingKeyError("invalid record keytype")

    try:
        namespace = key[:i].decode("ascii")
    except UnicodeDecodeError as e:
        raise InvalidRoutingKeyError("invalid record keytype") from e
    return namespace, key[i + 1 :]

"""
RFC3339 timestamps with nanosecond precision.

``datetime`` stops at microseconds, so timestamps are carried around as
integer nanoseconds since the Unix epoch and only the calendar part goes
through ``datetime``.
"""

from datetime import (
    datetime,
    timedelta,
    timezone,
)
import re

NANOSECONDS = 1_000_000_000

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_RFC3339_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})"
    r"(?:\.(\d{1,9}))?"
    r"([Zz]|[+-]\d{2}:\d{2})"
)


def format_rfc3339_nano(timestamp_ns: int) -> str:
    """
    Format ``timestamp_ns`` as UTC with exactly nine fractional digits,
    e.g. ``2024-01-01T00:00:00.000000000Z``.
    """
    seconds, nanos = divmod(timestamp_ns, NANOSECONDS)
    dt = EPOCH + timedelta(seconds=seconds)
    return f"{dt:%Y-%m-%dT%H:%M:%S}.{nanos:09d}Z"


def parse_rfc3339_nano(text: bytes | str) -> int:
    """
    Parse an RFC3339 timestamp into nanoseconds since the Unix epoch.

    Accepts zero to nine fractional digits and either ``Z`` or a numeric
    offset.

    :raises ValueError: if ``text`` is not a valid RFC3339 timestamp, or its
        offset moves it outside the years 1 to 9999
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("ascii")
        except UnicodeDecodeError as e:
            raise ValueError("timestamp is not ASCII") from e

    match = _RFC3339_RE.fullmatch(text)
    if match is None:
        raise ValueError("timestamp is not in RFC3339 format")

    year, month, day, hour, minute, second, fraction, offset = match.groups()
    dt = datetime(
        int(year),
        int(month),
        int(day),
        int(hour),
        int(minute),
        int(second),
        tzinfo=timezone.utc,
    )
    if offset not in ("Z", "z"):
        shift = timedelta(hours=int(offset[1:3]), minutes=int(offset[4:6]))
        try:
            dt = dt - shift if offset[0] == "+" else dt + shift
        except OverflowError as e:
            raise ValueError("timestamp is out of range") from e

    delta = dt - EPOCH
    seconds = delta.days * 86400 + delta.seconds
    nanos = int((fraction or "").ljust(9, "0"))
    return seconds * NANOSECONDS + nanos

"""
Timestamp helpers.

Google APIs report times as RFC 3339 strings with up to nanosecond
precision and a trailing 'Z'. Everything in the pipeline is kept in UTC.
"""

import re
from datetime import datetime, timezone

_RFC3339 = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<tz>Z|z|[+-]\d{2}:?\d{2})?$"
)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp into an aware UTC datetime.

    Fractional seconds beyond microseconds are truncated. A missing
    offset is read as UTC.

    Raises:
        ValueError: If the string is not a timestamp
    """
    match = _RFC3339.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Not an RFC 3339 timestamp: {value!r}")

    text = match.group("base").replace(" ", "T")
    frac = match.group("frac")
    if frac:
        text += "." + frac[:6].ljust(6, "0")

    tz = match.group("tz")
    if tz is None or tz in ("Z", "z"):
        text += "+00:00"
    elif ":" not in tz:
        text += f"{tz[:3]}:{tz[3:]}"
    else:
        text += tz

    return datetime.fromisoformat(text).astimezone(timezone.utc)


def to_utc(moment: datetime) -> datetime:
    """Return moment in UTC, treating naive datetimes as already UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def format_iso8601_ms(moment: datetime) -> str:
    """Format as ISO 8601 in UTC with millisecond precision, e.g. 2024-05-01T12:00:00.123Z."""
    moment = to_utc(moment)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)

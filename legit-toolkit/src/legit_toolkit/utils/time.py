"""
Timestamp helpers.

Timestamps are stored as ISO-8601 strings in UTC with millisecond precision
and a trailing 'Z' ('2025-01-01T10:00:00.000Z'), the format browsers produce
with 'Date.toISOString()'. Anything that orders records by time goes through
'parse_timestamp' instead of comparing the raw strings, so records written with
a '+00:00' offset sort correctly next to 'Z' records.
"""

from datetime import datetime, timezone


def get_current_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

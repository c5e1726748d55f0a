"""
Time Utilities

Timestamps reach this service in two places:
- Query parameters `start` / `end` (ISO 8601 strings, e.g. "2024-05-14T10:00:00Z")
- The `time` field of every upstream entry (ISO 8601 strings, occasionally epoch numbers)

Range filtering has to compare instants, not strings, so everything is
normalized into timezone-aware UTC datetime objects here.
"""

from datetime import datetime, timezone
from typing import Union

from dateutil import parser as dateparser


def to_utc_datetime(value: Union[str, int, float, datetime]) -> datetime:
    """
    Convert an ISO string, epoch timestamp or datetime to a UTC datetime.

    Detection Logic:
        - datetime: naive values are assumed to be UTC, aware values are converted
        - str: parsed as ISO 8601 ("Z" and "+hh:mm" offsets supported)
        - int/float > 1e12: milliseconds since epoch
        - int/float otherwise: seconds since epoch

    Args:
        value: Timestamp in any supported representation

    Returns:
        datetime: Timezone-aware datetime object in UTC

    Raises:
        ValueError: If the value cannot be interpreted as an instant

    Examples:
        >>> to_utc_datetime("2024-05-14T10:00:00Z")
        datetime.datetime(2024, 5, 14, 10, 0, tzinfo=datetime.timezone.utc)

        >>> to_utc_datetime("2024-05-14T12:00:00+02:00")
        datetime.datetime(2024, 5, 14, 10, 0, tzinfo=datetime.timezone.utc)

        >>> to_utc_datetime(1715680800000)
        datetime.datetime(2024, 5, 14, 10, 0, tzinfo=datetime.timezone.utc)
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    elif isinstance(value, (int, float)):
        if value < 0:
            raise ValueError(f"Timestamp cannot be negative: {value}")
        if value > 1e12:
            value = value / 1000.0
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OSError, OverflowError, ValueError) as e:
            raise ValueError(f"Invalid timestamp: {value}. Error: {e}")
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Timestamp cannot be empty")
        try:
            dt = dateparser.isoparse(text)
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Invalid timestamp: {value!r}. Error: {e}")
    else:
        raise ValueError(f"Unsupported timestamp type: {type(value).__name__}")

    # If datetime is naive (no timezone), assume UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)

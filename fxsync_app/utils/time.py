"""
Time handling utilities for remote payload timestamps and wall-clock time.

Remote sources send ISO-8601 strings or epoch milliseconds. Everything is
converted to timezone-aware UTC datetimes at the parsing boundary.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Union

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(ts: datetime) -> datetime:
    """
    Normalize a datetime to UTC.

    Args:
        ts: Aware or naive datetime; naive values are taken to be UTC

    Returns:
        Aware UTC datetime
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def parse_timestamp(value: Union[str, int, float, datetime]) -> datetime:
    """
    Parse a payload timestamp into an aware UTC datetime.

    Args:
        value: ISO-8601 string (a trailing "Z" is accepted), epoch
            milliseconds, or a datetime

    Returns:
        Aware UTC datetime

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if isinstance(value, datetime):
        return ensure_utc(value)

    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")

    if isinstance(value, (int, float)):
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"Invalid epoch timestamp: {value!r}")
        return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty timestamp")
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        return ensure_utc(datetime.fromisoformat(text))

    raise ValueError(f"Unsupported timestamp type: {type(value).__name__}")


def format_timestamp(ts: datetime) -> str:
    """Format a timestamp as ISO-8601 for logging and payloads."""
    return ensure_utc(ts).isoformat()


def elapsed_minutes(start: datetime, end: Optional[datetime] = None) -> int:
    """
    Whole minutes elapsed between two timestamps, floored.

    Args:
        start: Earlier timestamp
        end: Later timestamp, defaults to now

    Returns:
        Floor of the elapsed minutes; negative when start is in the future
    """
    if end is None:
        end = utc_now()

    seconds = (ensure_utc(end) - ensure_utc(start)).total_seconds()
    return math.floor(seconds / 60)


def hourly_steps(anchor: datetime, count: int, start_offset: int = 0) -> list[datetime]:
    """
    Build a sequence of timestamps spaced one hour apart.

    Args:
        anchor: Reference timestamp
        count: Number of timestamps
        start_offset: Hour offset of the first timestamp relative to anchor

    Returns:
        Ascending list of timestamps anchor + (start_offset + i) hours
    """
    return [anchor + timedelta(hours=start_offset + i) for i in range(count)]

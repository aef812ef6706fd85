"""Currency-aware rounding and relative timestamps"""

from datetime import datetime
from typing import Optional

from ..data.models import Pair
from ..utils.time import elapsed_minutes

JPY_DECIMALS = 2
DEFAULT_DECIMALS = 4
NOT_AVAILABLE = "N/A"


def display_decimals(pair: Pair) -> int:
    """Yen-quoted pairs show 2 decimals, everything else 4."""
    return JPY_DECIMALS if pair.quote == "JPY" else DEFAULT_DECIMALS


def round_display(value: float, pair: Pair) -> float:
    return round(value, display_decimals(pair))


def display_value(value: Optional[float], pair: Pair) -> str:
    """
    Format a rate-denominated value with the pair's display precision

    Args:
        value: Rate, change or predicted value; None when absent
        pair: Pair whose quote currency decides the precision

    Returns:
        Fixed-decimal string such as "1.0545" or "149.52", "N/A" when absent
    """
    if value is None:
        return NOT_AVAILABLE
    return f"{value:.{display_decimals(pair)}f}"


def format_signed(value: Optional[float], pair: Pair) -> str:
    if value is None:
        return NOT_AVAILABLE
    sign = "+" if value >= 0 else ""
    return f"{sign}{display_value(value, pair)}"


def format_percent(value: Optional[float]) -> str:
    if value is None:
        return NOT_AVAILABLE
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.2f}%"


def relative_time(timestamp: datetime, now: datetime) -> str:
    """
    Human "time ago" label, floored at each tier

    Tiers: under 1 minute, under 60 minutes, under 24 hours, then days.
    Timestamps in the future read as "just now".

    Args:
        timestamp: Instant being described
        now: Reference instant

    Returns:
        "just now", "{n}m ago", "{n}h ago" or "{n}d ago"
    """
    minutes = elapsed_minutes(timestamp, now)

    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"

    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"

    return f"{hours // 24}d ago"

"""Derived analytics: percent change, display rounding and relative times"""

from .changes import ChangeDirection, change_direction, percent_change
from .formatting import (
    display_decimals,
    display_value,
    format_percent,
    format_signed,
    relative_time,
    round_display,
)
from .view import AnalyticsView, DashboardView, model_label

__all__ = [
    "AnalyticsView",
    "ChangeDirection",
    "DashboardView",
    "change_direction",
    "display_decimals",
    "display_value",
    "format_percent",
    "format_signed",
    "model_label",
    "percent_change",
    "relative_time",
    "round_display",
]

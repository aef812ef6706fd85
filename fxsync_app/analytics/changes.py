"""Percent change and direction of a rate quote"""

from enum import Enum

from ..data.models import RateQuote


class ChangeDirection(str, Enum):
    UP = "up"
    DOWN = "down"


def percent_change(quote: RateQuote) -> float:
    """
    Change relative to the current rate, in percent

    percent = change / rate * 100

    Args:
        quote: Rate quote carrying rate and signed change

    Returns:
        Percent change, 0.0 when the rate is zero
    """
    if quote.rate == 0:
        return 0.0
    return quote.change / quote.rate * 100


def change_direction(quote: RateQuote) -> ChangeDirection:
    """Zero change counts as up."""
    return ChangeDirection.UP if quote.change >= 0 else ChangeDirection.DOWN

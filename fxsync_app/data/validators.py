"""
Structural invariant checks for normalized entities.

The same checks run on normalized remote data and on fallback output, so a
value that reaches session state satisfies them regardless of its origin.
"""

import math
from datetime import datetime
from typing import Iterable, Mapping, Sequence

from ..errors import (
    MalformedDataError,
    MissingDataError,
    PartialDataError,
    TemporalDataError,
)
from ..utils.time import format_timestamp
from .models import Forecast, HistoricalPoint, NewsArticle, Pair, RateQuote, SentimentLabel


def _finite(value: float) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)


def validate_rate_quote(quote: RateQuote) -> None:
    """Check a single quote."""
    if not isinstance(quote.pair, Pair):
        raise MalformedDataError(f"Quote pair must be a Pair, got {quote.pair!r}")
    if not _finite(quote.rate) or quote.rate <= 0:
        raise MalformedDataError(f"Rate for {quote.pair.value} must be positive",
                                 raw_data=repr(quote.rate))
    if not _finite(quote.change):
        raise MalformedDataError(f"Change for {quote.pair.value} must be finite",
                                 raw_data=repr(quote.change))
    if not isinstance(quote.timestamp, datetime) or quote.timestamp.tzinfo is None:
        raise TemporalDataError(f"Quote timestamp for {quote.pair.value} must be aware")


def validate_rates(rates: Mapping[Pair, RateQuote], pairs: Iterable[Pair]) -> None:
    """Check that every configured pair holds a valid quote keyed by itself."""
    missing = [p.value for p in pairs if rates.get(p) is None]
    if missing:
        raise PartialDataError(
            f"Rates missing for {', '.join(missing)}",
            missing_fields=missing,
            available_fields=[p.value for p in rates]
        )

    for pair, quote in rates.items():
        if quote.pair != pair:
            raise MalformedDataError(
                f"Quote keyed {pair.value} carries pair {quote.pair.value}"
            )
        validate_rate_quote(quote)


def validate_history(points: Sequence[HistoricalPoint], limit: int) -> None:
    """Check length bound, ascending order and point values."""
    if len(points) > limit:
        raise MalformedDataError(
            f"History has {len(points)} points, limit is {limit}"
        )

    previous = None
    for point in points:
        if not _finite(point.rate) or point.rate <= 0:
            raise MalformedDataError("History rate must be positive", raw_data=repr(point.rate))
        if not isinstance(point.volume, int) or point.volume < 0:
            raise MalformedDataError("History volume must be a non-negative integer",
                                     raw_data=repr(point.volume))
        if previous is not None and point.timestamp < previous:
            raise TemporalDataError(
                "History must be ordered oldest to newest",
                timestamp=format_timestamp(point.timestamp),
                expected_after=format_timestamp(previous)
            )
        previous = point.timestamp


def validate_news(articles: Sequence[NewsArticle]) -> None:
    """Check ids are unique and sentiment is classified."""
    seen = set()
    for article in articles:
        if not article.id:
            raise MissingDataError("Article id must not be empty", data_type="id")
        if article.id in seen:
            raise MalformedDataError(f"Duplicate article id: {article.id}")
        seen.add(article.id)
        if not isinstance(article.sentiment.label, SentimentLabel):
            raise MalformedDataError(f"Article {article.id} has unclassified sentiment")


def validate_forecast(forecast: Forecast, pair: Pair, issued_at: datetime) -> None:
    """
    Check a forecast targets the pair and its predictions lie strictly after
    the issue time in strictly increasing order.
    """
    if forecast.pair != pair:
        raise MalformedDataError(
            f"Forecast is for {forecast.pair.value}, requested {pair.value}"
        )
    if not forecast.predictions:
        raise MissingDataError("Forecast has no predictions", data_type="predictions")

    accuracy = forecast.model_info.accuracy
    if not _finite(accuracy) or not 0 <= accuracy <= 1:
        raise MalformedDataError("Model accuracy must be within [0, 1]", raw_data=repr(accuracy))

    previous = issued_at
    for point in forecast.predictions:
        if point.timestamp <= previous:
            raise TemporalDataError(
                "Forecast timestamps must be strictly increasing and after issue time",
                timestamp=format_timestamp(point.timestamp),
                expected_after=format_timestamp(previous)
            )
        if not _finite(point.predicted) or point.predicted <= 0:
            raise MalformedDataError("Predicted rate must be positive",
                                     raw_data=repr(point.predicted))
        if not _finite(point.confidence) or not 0 <= point.confidence <= 1:
            raise MalformedDataError("Confidence must be within [0, 1]",
                                     raw_data=repr(point.confidence))
        previous = point.timestamp


def validate_confidence_decay(forecast: Forecast) -> None:
    """Check confidence never increases along the horizon."""
    confidences = [p.confidence for p in forecast.predictions]
    for earlier, later in zip(confidences, confidences[1:]):
        if later > earlier:
            raise MalformedDataError(
                "Confidence must be non-increasing across the horizon",
                raw_data=repr(confidences)
            )

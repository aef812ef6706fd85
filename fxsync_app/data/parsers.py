"""
Payload parsers for converting raw JSON entities to canonical objects.

Each parser handles one entity shape from the remote API and raises a
DataQualityError subclass describing the first problem it finds. Numeric
fields may arrive as JSON numbers or numeric strings.
"""

import math
from typing import Any, Mapping, Optional

from ..errors import MalformedDataError, MissingDataError
from ..utils.time import parse_timestamp
from .models import (
    HistoricalPoint,
    ModelInfo,
    NewsArticle,
    Pair,
    PredictionPoint,
    RateQuote,
    Sentiment,
    SentimentLabel,
)


def require_mapping(payload: Any, what: str) -> Mapping[str, Any]:
    """Ensure a payload entity is a JSON object."""
    if not isinstance(payload, Mapping):
        raise MalformedDataError(
            f"{what} must be an object, got {type(payload).__name__}",
            raw_data=repr(payload)[:100],
            expected_format="object"
        )
    return payload


def require_list(payload: Any, what: str) -> list:
    """Ensure a payload entity is a JSON array."""
    if not isinstance(payload, list):
        raise MalformedDataError(
            f"{what} must be an array, got {type(payload).__name__}",
            raw_data=repr(payload)[:100],
            expected_format="array"
        )
    return payload


def require_field(raw: Mapping[str, Any], name: str, what: str) -> Any:
    """Fetch a required field, treating null as missing."""
    value = raw.get(name)
    if value is None:
        raise MissingDataError(f"{what} is missing '{name}'", data_type=name)
    return value


def parse_number(value: Any, name: str, *, positive: bool = False,
                 non_negative: bool = False) -> float:
    """Parse a finite float with optional sign constraints."""
    if isinstance(value, bool):
        raise MalformedDataError(f"'{name}' must be numeric", raw_data=repr(value))
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise MalformedDataError(
            f"'{name}' must be numeric", raw_data=repr(value)[:100]
        ) from None

    if not math.isfinite(number):
        raise MalformedDataError(f"'{name}' must be finite", raw_data=repr(value))
    if positive and number <= 0:
        raise MalformedDataError(f"'{name}' must be positive", raw_data=repr(value))
    if non_negative and number < 0:
        raise MalformedDataError(f"'{name}' must be non-negative", raw_data=repr(value))
    return number


def parse_unit_interval(value: Any, name: str) -> float:
    """Parse a float constrained to [0, 1]."""
    number = parse_number(value, name)
    if number < 0 or number > 1:
        raise MalformedDataError(f"'{name}' must be within [0, 1]", raw_data=repr(value))
    return number


def parse_volume(value: Any) -> int:
    """Parse a non-negative integral volume."""
    number = parse_number(value, "volume", non_negative=True)
    if not number.is_integer():
        raise MalformedDataError("'volume' must be an integer", raw_data=repr(value))
    return int(number)


def parse_time(value: Any, name: str = "timestamp"):
    """Parse a timestamp field."""
    try:
        return parse_timestamp(value)
    except ValueError as e:
        raise MalformedDataError(
            f"'{name}' is not a valid timestamp: {e}",
            raw_data=repr(value)[:100],
            expected_format="ISO-8601 or epoch milliseconds"
        ) from None


def parse_text(raw: Mapping[str, Any], name: str, what: str,
               allow_empty: bool = False) -> str:
    """Parse a required string field."""
    value = require_field(raw, name, what)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        raise MalformedDataError(f"{what} '{name}' must be a string", raw_data=repr(value)[:100])
    if not allow_empty and not value.strip():
        raise MalformedDataError(f"{what} '{name}' must not be empty")
    return value


def parse_rate_quote(pair: Pair, raw: Any) -> RateQuote:
    """Parse one entry of the rates map; the pair comes from its key."""
    raw = require_mapping(raw, f"rate for {pair.value}")
    what = f"rate for {pair.value}"
    return RateQuote(
        pair=pair,
        rate=parse_number(require_field(raw, "rate", what), "rate", positive=True),
        change=parse_number(raw.get("change", 0.0), "change"),
        timestamp=parse_time(require_field(raw, "timestamp", what)),
    )


def parse_historical_point(raw: Any) -> HistoricalPoint:
    """Parse one historical series point."""
    raw = require_mapping(raw, "history point")
    return HistoricalPoint(
        timestamp=parse_time(require_field(raw, "timestamp", "history point")),
        rate=parse_number(require_field(raw, "rate", "history point"), "rate", positive=True),
        volume=parse_volume(require_field(raw, "volume", "history point")),
    )


def parse_sentiment(raw: Optional[Any]) -> Sentiment:
    """Parse article sentiment, defaulting to neutral when absent."""
    if raw is None:
        return Sentiment()

    raw = require_mapping(raw, "sentiment")
    label = raw.get("label")
    if label is None:
        return Sentiment()

    try:
        parsed_label = SentimentLabel(str(label).lower())
    except ValueError:
        raise MalformedDataError(
            f"Unknown sentiment label: {label!r}",
            expected_format="positive|negative|neutral"
        ) from None

    return Sentiment(label=parsed_label, score=parse_number(raw.get("score", 0.0), "score"))


def parse_news_article(raw: Any) -> NewsArticle:
    """Parse one news article."""
    raw = require_mapping(raw, "article")
    return NewsArticle(
        id=parse_text(raw, "id", "article"),
        title=parse_text(raw, "title", "article"),
        content=parse_text(raw, "content", "article", allow_empty=True),
        source=parse_text(raw, "source", "article"),
        timestamp=parse_time(require_field(raw, "timestamp", "article")),
        sentiment=parse_sentiment(raw.get("sentiment")),
    )


def parse_prediction_point(raw: Any) -> PredictionPoint:
    """Parse one forecast step."""
    raw = require_mapping(raw, "prediction")
    return PredictionPoint(
        timestamp=parse_time(require_field(raw, "timestamp", "prediction")),
        predicted=parse_number(require_field(raw, "predicted", "prediction"), "predicted",
                               positive=True),
        confidence=parse_unit_interval(require_field(raw, "confidence", "prediction"),
                                       "confidence"),
    )


def parse_model_info(raw: Any) -> ModelInfo:
    """Parse forecast model metadata."""
    raw = require_mapping(raw, "model_info")
    return ModelInfo(
        accuracy=parse_unit_interval(require_field(raw, "accuracy", "model_info"), "accuracy")
    )

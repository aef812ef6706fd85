"""
Canonical data models for normalized market data.

This module defines immutable data structures that represent clean, validated
market data after normalization from raw source payloads or after synthesis
by the fallback generator. Both paths produce exactly these shapes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class Pair(str, Enum):
    """Tracked base/quote currency pairs."""
    USD_EUR = "USD/EUR"
    USD_GBP = "USD/GBP"
    USD_JPY = "USD/JPY"
    EUR_GBP = "EUR/GBP"
    EUR_JPY = "EUR/JPY"
    GBP_JPY = "GBP/JPY"

    @property
    def base(self) -> str:
        return self.value.split("/")[0]

    @property
    def quote(self) -> str:
        return self.value.split("/")[1]

    @classmethod
    def parse(cls, value: "str | Pair") -> "Pair":
        """Resolve a pair from its "BASE/QUOTE" form."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown currency pair: {value!r}") from None

    def __str__(self) -> str:
        return self.value


class SourceKind(str, Enum):
    """Remote data source kinds."""
    RATES = "rates"
    HISTORY = "history"
    NEWS = "news"
    FORECAST = "forecast"


class SentimentLabel(str, Enum):
    """News sentiment classification."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class RateQuote:
    """Latest quote for one pair."""
    pair: Pair
    rate: float            # > 0
    change: float          # Signed change over the source's window
    timestamp: datetime    # UTC


@dataclass(frozen=True)
class HistoricalPoint:
    """One point of a historical rate series."""
    timestamp: datetime    # UTC
    rate: float            # > 0
    volume: int            # >= 0


@dataclass(frozen=True)
class Sentiment:
    """Sentiment attached to a news article."""
    label: SentimentLabel = SentimentLabel.NEUTRAL
    score: float = 0.0


@dataclass(frozen=True)
class NewsArticle:
    """Market news article."""
    id: str
    title: str
    content: str
    source: str
    timestamp: datetime
    sentiment: Sentiment = field(default_factory=Sentiment)


@dataclass(frozen=True)
class PredictionPoint:
    """Single forecast step."""
    timestamp: datetime
    predicted: float
    confidence: float      # [0, 1]


@dataclass(frozen=True)
class ModelInfo:
    """Forecast model metadata."""
    accuracy: float        # [0, 1]


@dataclass(frozen=True)
class Forecast:
    """Forecast for one pair, predictions in strictly increasing time order."""
    pair: Pair
    predictions: tuple[PredictionPoint, ...]
    model_info: ModelInfo


@dataclass(frozen=True)
class SourceResult:
    """
    Outcome of one data source fetch.

    ``data`` has the same shape whether it came from the remote source or from
    the fallback generator; ``ok`` only records which one it was.
    """
    kind: SourceKind
    ok: bool
    data: Any
    pair: Optional[Pair] = None
    failure: Optional[str] = None
    backfilled: tuple[Pair, ...] = ()

    @classmethod
    def success(cls, kind: SourceKind, data: Any, pair: Optional[Pair] = None,
                backfilled: tuple[Pair, ...] = ()) -> "SourceResult":
        """Create result for normalized remote data."""
        return cls(kind=kind, ok=True, data=data, pair=pair, backfilled=backfilled)

    @classmethod
    def fallback(cls, kind: SourceKind, data: Any, pair: Optional[Pair],
                 failure: str) -> "SourceResult":
        """Create result for substituted synthetic data."""
        return cls(kind=kind, ok=False, data=data, pair=pair, failure=failure)

"""
Synthetic fallback data for unreachable or misbehaving sources.

Output shapes are fixed and values are randomized. Every generated entity is
run through the same structural validators as normalized remote data; a
violation means the generator itself is broken and is raised as a
FallbackContractError rather than handed to session state.
"""

import random
from datetime import timedelta
from typing import Callable, Iterable, Optional, TypeVar

from ..config.defaults import FallbackParams
from ..errors import DataQualityError, FallbackContractError
from ..data.models import (
    Forecast,
    HistoricalPoint,
    ModelInfo,
    NewsArticle,
    Pair,
    PredictionPoint,
    RateQuote,
    Sentiment,
    SentimentLabel,
    SourceKind,
)
from ..data.validators import (
    validate_confidence_decay,
    validate_forecast,
    validate_history,
    validate_news,
    validate_rate_quote,
    validate_rates,
)
from ..utils.time import Clock, hourly_steps, utc_now

T = TypeVar("T")

# (rate, change) per pair, taken from typical market levels
SEED_QUOTES: dict[Pair, tuple[float, float]] = {
    Pair.USD_EUR: (1.0545, 0.0023),
    Pair.USD_GBP: (0.7823, -0.0012),
    Pair.USD_JPY: (149.85, 0.45),
    Pair.EUR_GBP: (0.8412, 0.0008),
    Pair.EUR_JPY: (142.15, 0.78),
    Pair.GBP_JPY: (191.58, -0.32),
}

# (title, content, source, hours ago, label, score)
NEWS_POOL: tuple[tuple[str, str, str, int, SentimentLabel, float], ...] = (
    (
        "Federal Reserve Signals Policy Changes",
        "The Federal Reserve indicated potential monetary policy adjustments...",
        "Reuters", 2, SentimentLabel.NEUTRAL, 0.1,
    ),
    (
        "European Central Bank Maintains Rates",
        "The ECB decided to keep interest rates unchanged...",
        "Bloomberg", 4, SentimentLabel.POSITIVE, 0.3,
    ),
    (
        "{base} Slips as Traders Reassess {quote} Outlook",
        "Currency desks trimmed {base} exposure ahead of upcoming data releases...",
        "Financial Times", 6, SentimentLabel.NEGATIVE, -0.2,
    ),
)


class FallbackGenerator:
    """Produces structurally valid synthetic data for each source kind."""

    def __init__(
        self,
        params: Optional[FallbackParams] = None,
        clock: Clock = utc_now,
        rng: Optional[random.Random] = None
    ) -> None:
        self.params = params or FallbackParams()
        self.clock = clock
        self.rng = rng or random.Random(self.params.seed)

    def generate(
        self,
        kind: SourceKind,
        pair: Optional[Pair] = None,
        *,
        pairs: Optional[Iterable[Pair]] = None,
        limit: int = 20,
        horizon: int = 12,
        reference_rate: Optional[float] = None
    ):
        """
        Generate fallback data for a source kind.

        Args:
            kind: Source kind to synthesize
            pair: Target pair (required for history, news and forecast)
            pairs: Pairs to cover for rates, defaults to every known pair
            limit: Number of history points
            horizon: Number of forecast steps
            reference_rate: Center for history and forecast values

        Returns:
            Data in the same shape the corresponding source normalizes to
        """
        if kind == SourceKind.RATES:
            return self.rates(pairs if pairs is not None else list(Pair))

        if pair is None:
            raise FallbackContractError(
                f"Fallback for {kind.value} requires a pair", kind=kind.value
            )

        if kind == SourceKind.HISTORY:
            return self.history(pair, limit, reference_rate)
        if kind == SourceKind.NEWS:
            return self.news(pair)
        if kind == SourceKind.FORECAST:
            return self.forecast(pair, horizon, reference_rate)

        raise FallbackContractError(f"Unknown source kind: {kind!r}")

    def seed_rate(self, pair: Pair) -> float:
        """Plausible base rate for a pair."""
        return SEED_QUOTES[pair][0]

    def rate_quote(self, pair: Pair) -> RateQuote:
        """Single synthetic quote around the pair's seed level."""
        base_rate, base_change = SEED_QUOTES[pair]
        p = self.params
        quote = RateQuote(
            pair=pair,
            rate=base_rate * (1 + self.rng.uniform(-p.rate_jitter_pct, p.rate_jitter_pct)),
            change=base_change + base_rate * self.rng.uniform(-p.change_jitter_pct,
                                                               p.change_jitter_pct),
            timestamp=self.clock(),
        )
        return self._verified(SourceKind.RATES, pair, quote, validate_rate_quote)

    def rates(self, pairs: Iterable[Pair]) -> dict[Pair, RateQuote]:
        """Complete synthetic rates map."""
        pairs = tuple(pairs)
        rates = {pair: self.rate_quote(pair) for pair in pairs}
        return self._verified(SourceKind.RATES, None, rates,
                              lambda data: validate_rates(data, pairs))

    def history(
        self,
        pair: Pair,
        limit: int,
        reference_rate: Optional[float] = None
    ) -> tuple[HistoricalPoint, ...]:
        """Hourly points ending now, oldest first."""
        p = self.params
        center = self._reference(pair, reference_rate)
        now = self.clock()
        points = tuple(
            HistoricalPoint(
                timestamp=ts,
                rate=center * (1 + self.rng.uniform(-p.history_jitter_pct,
                                                    p.history_jitter_pct)),
                volume=self.rng.randrange(p.volume_min, p.volume_max),
            )
            for ts in hourly_steps(now, limit, start_offset=-(limit - 1))
        )
        return self._verified(SourceKind.HISTORY, pair, points,
                              lambda data: validate_history(data, limit))

    def news(self, pair: Pair) -> tuple[NewsArticle, ...]:
        """Fixed pool of placeholder articles with staggered past timestamps."""
        now = self.clock()
        articles = tuple(
            NewsArticle(
                id=f"fallback-{pair.base}{pair.quote}-{index}",
                title=title.format(base=pair.base, quote=pair.quote),
                content=content.format(base=pair.base, quote=pair.quote),
                source=source,
                timestamp=now - timedelta(hours=hours_ago),
                sentiment=Sentiment(label=label, score=score),
            )
            for index, (title, content, source, hours_ago, label, score)
            in enumerate(NEWS_POOL, start=1)
        )
        return self._verified(SourceKind.NEWS, pair, articles, validate_news)

    def forecast(
        self,
        pair: Pair,
        horizon: int,
        reference_rate: Optional[float] = None
    ) -> Forecast:
        """Hourly predictions starting one hour from now with decaying confidence."""
        p = self.params
        center = self._reference(pair, reference_rate)
        now = self.clock()
        predictions = tuple(
            PredictionPoint(
                timestamp=ts,
                predicted=center * (1 + self.rng.uniform(-p.forecast_jitter_pct,
                                                         p.forecast_jitter_pct)),
                confidence=max(0.0, p.confidence_start - i * p.confidence_step),
            )
            for i, ts in enumerate(hourly_steps(now, horizon, start_offset=1))
        )
        forecast = Forecast(
            pair=pair,
            predictions=predictions,
            model_info=ModelInfo(accuracy=p.model_accuracy),
        )

        def check(data: Forecast) -> None:
            validate_forecast(data, pair, now)
            validate_confidence_decay(data)

        return self._verified(SourceKind.FORECAST, pair, forecast, check)

    def _reference(self, pair: Pair, reference_rate: Optional[float]) -> float:
        if reference_rate is not None and reference_rate > 0:
            return reference_rate
        return self.seed_rate(pair)

    def _verified(
        self,
        kind: SourceKind,
        pair: Optional[Pair],
        data: T,
        check: Callable[[T], None]
    ) -> T:
        try:
            check(data)
        except DataQualityError as e:
            raise FallbackContractError(
                f"Fallback {kind.value} data violates invariants: {e}",
                kind=kind.value,
                pair=pair.value if pair else None
            ) from e
        return data

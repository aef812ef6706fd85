"""View model derived from a session snapshot"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..config.defaults import DisplayParams
from ..data.models import Forecast, Pair
from ..state.models import ConnectionStatus, SessionState
from ..utils.time import Clock, utc_now
from .changes import ChangeDirection, change_direction, percent_change
from .formatting import (
    NOT_AVAILABLE,
    display_value,
    format_percent,
    format_signed,
    relative_time,
)


def model_label(forecast: Forecast, model: str = "ensemble") -> str:
    """Label such as "Ensemble (84.7% accuracy)"."""
    accuracy = forecast.model_info.accuracy * 100
    return f"{model.capitalize()} ({accuracy:.1f}% accuracy)"


@dataclass(frozen=True)
class RateCard:
    """Headline quote for the tracked pair"""
    pair: Pair
    rate: str
    change: str
    percent: str
    percent_value: float
    direction: ChangeDirection
    updated: str


@dataclass(frozen=True)
class HistoryRow:
    timestamp: datetime
    rate: str
    volume: int


@dataclass(frozen=True)
class PredictionRow:
    timestamp: datetime
    predicted: str
    confidence: str   # e.g. "85%"


@dataclass(frozen=True)
class ForecastPanel:
    label: str
    predictions: tuple[PredictionRow, ...]


@dataclass(frozen=True)
class NewsItem:
    id: str
    title: str
    content: str
    source: str
    sentiment: str
    score: float
    published: str


@dataclass(frozen=True)
class DashboardView:
    """Everything an external renderer needs for one frame"""
    tracked_pair: Optional[Pair]
    rate_card: Optional[RateCard]
    history: tuple[HistoryRow, ...]
    forecast: Optional[ForecastPanel]
    news: tuple[NewsItem, ...]
    connection_status: ConnectionStatus
    loading: bool
    last_updated: str


class AnalyticsView:
    """
    Stateless derivation of display values from a SessionState.

    Nothing is cached; every call to ``build`` recomputes from the snapshot
    it is given.
    """

    def __init__(
        self,
        params: Optional[DisplayParams] = None,
        model: str = "ensemble",
        clock: Clock = utc_now
    ):
        self.params = params or DisplayParams()
        self.model = model
        self.clock = clock

    def build(self, state: SessionState, now: Optional[datetime] = None) -> DashboardView:
        """
        Build the dashboard view for a snapshot

        Args:
            state: Session snapshot
            now: Reference instant for relative times, defaults to the clock

        Returns:
            DashboardView
        """
        now = now or self.clock()
        pair = state.tracked_pair

        return DashboardView(
            tracked_pair=pair,
            rate_card=self._rate_card(state, now),
            history=self._history(state) if pair else (),
            forecast=self._forecast(state.forecast),
            news=self._news(state, now),
            connection_status=state.connection_status,
            loading=state.loading,
            last_updated=(
                relative_time(state.last_successful_rate_fetch, now)
                if state.last_successful_rate_fetch else NOT_AVAILABLE
            ),
        )

    def _rate_card(self, state: SessionState, now: datetime) -> Optional[RateCard]:
        quote = state.current_quote
        if quote is None:
            return None

        percent = percent_change(quote)
        return RateCard(
            pair=quote.pair,
            rate=display_value(quote.rate, quote.pair),
            change=format_signed(quote.change, quote.pair),
            percent=format_percent(percent),
            percent_value=percent,
            direction=change_direction(quote),
            updated=relative_time(quote.timestamp, now),
        )

    def _history(self, state: SessionState) -> tuple[HistoryRow, ...]:
        pair = state.tracked_pair
        return tuple(
            HistoryRow(
                timestamp=point.timestamp,
                rate=display_value(point.rate, pair),
                volume=point.volume,
            )
            for point in state.history
        )

    def _forecast(self, forecast: Optional[Forecast]) -> Optional[ForecastPanel]:
        if forecast is None:
            return None

        rows = tuple(
            PredictionRow(
                timestamp=p.timestamp,
                predicted=display_value(p.predicted, forecast.pair),
                confidence=f"{p.confidence * 100:.0f}%",
            )
            for p in forecast.predictions
        )
        return ForecastPanel(label=model_label(forecast, self.model), predictions=rows)

    def _news(self, state: SessionState, now: datetime) -> tuple[NewsItem, ...]:
        limit = self.params.news_display_limit
        return tuple(
            NewsItem(
                id=article.id,
                title=article.title,
                content=article.content,
                source=article.source,
                sentiment=article.sentiment.label.value,
                score=article.sentiment.score,
                published=relative_time(article.timestamp, now),
            )
            for article in state.news[:limit]
        )

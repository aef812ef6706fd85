"""
Session orchestrator.

Owns the session state and sequences every fetch: initial load, pair
selection, manual refresh and the periodic rates timer. All mutation goes
through this class; renderers read frozen snapshots or the derived view.

Pair-scoped fetches are tagged with the pair they were issued for and their
results are applied only while that pair is still tracked, so the most
recently selected pair always wins.
"""

import asyncio
from datetime import datetime
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Optional, Union

import httpx

from .analytics.view import AnalyticsView, DashboardView
from .config.defaults import DashboardConfig, get_default_config
from .data.models import (
    Forecast,
    HistoricalPoint,
    NewsArticle,
    Pair,
    RateQuote,
    SourceKind,
    SourceResult,
)
from .errors import SystemFailureError
from .fallback.generator import FallbackGenerator
from .logging.config import get_logger
from .scheduler import RefreshScheduler
from .sources import ApiClient, ForecastSource, HistorySource, NewsSource, RatesSource
from .state.machine import ConnectionStateMachine
from .state.models import ConnectionStatus, SessionState
from .utils.time import Clock, utc_now

logger = get_logger(__name__)

Subscriber = Callable[[SessionState], None]


class SyncOrchestrator:
    """
    Single writer of the dashboard session.

    Typical use::

        async with SyncOrchestrator.create(config) as orchestrator:
            orchestrator.subscribe(render)
            await orchestrator.select_pair("USD/GBP")
    """

    def __init__(
        self,
        rates: RatesSource,
        history: HistorySource,
        news: NewsSource,
        forecast: ForecastSource,
        config: Optional[DashboardConfig] = None,
        api: Optional[ApiClient] = None,
        clock: Clock = utc_now
    ) -> None:
        self.config = config or get_default_config()
        self.logger = logger
        self.clock = clock

        # Sources
        self.rates_source = rates
        self.history_source = history
        self.news_source = news
        self.forecast_source = forecast
        self.api = api

        self.pairs = tuple(Pair.parse(p) for p in self.config.pairs.pairs)
        self.machine = ConnectionStateMachine(clock=clock)
        self.scheduler = RefreshScheduler(
            self.tick, self.config.scheduler.refresh_interval_seconds
        )
        self.analytics = AnalyticsView(
            self.config.display, model=self.config.forecast.model, clock=clock
        )

        # Session state
        self._rates: dict[Pair, RateQuote] = {}
        default_pair = self.config.pairs.default_pair
        self._tracked_pair: Optional[Pair] = Pair.parse(default_pair) if default_pair else None
        self._history: tuple[HistoricalPoint, ...] = ()
        self._news: tuple[NewsArticle, ...] = ()
        self._forecast: Optional[Forecast] = None
        self._last_rate_fetch: Optional[datetime] = None
        self._loading = False
        self._initializing = False

        self._subscribers: list[Subscriber] = []

    @classmethod
    def create(
        cls,
        config: Optional[DashboardConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Clock = utc_now,
        fallback: Optional[FallbackGenerator] = None
    ) -> "SyncOrchestrator":
        """
        Wire the orchestrator and its sources from configuration.

        Args:
            config: Dashboard configuration, defaults when omitted
            transport: Optional httpx transport, e.g. ``httpx.MockTransport``
            clock: Wall-clock source shared by every component
            fallback: Fallback generator override, e.g. a seeded one

        Returns:
            SyncOrchestrator owning its HTTP client
        """
        config = config or get_default_config()
        api = ApiClient.from_params(config.api, transport=transport)
        fallback = fallback or FallbackGenerator(config.fallback, clock=clock)
        pairs = tuple(Pair.parse(p) for p in config.pairs.pairs)

        return cls(
            rates=RatesSource(api, fallback, pairs=pairs, clock=clock),
            history=HistorySource(api, fallback, params=config.history, clock=clock),
            news=NewsSource(api, fallback, clock=clock),
            forecast=ForecastSource(api, fallback, params=config.forecast, clock=clock),
            config=config,
            api=api,
            clock=clock,
        )

    # Lifecycle

    async def initialize(self) -> SessionState:
        """Load rates, then the tracked pair's history, news and forecast."""
        self._loading = True
        self._initializing = True
        self._notify()

        try:
            await self.refresh_rates()

            pair = self._tracked_pair
            if pair is not None:
                await self._load_pair_sequentially(pair)

            # A pair selected while loading has not been fetched yet
            while self._tracked_pair is not None and self._tracked_pair != pair:
                pair = self._tracked_pair
                self.logger.info("Fetching pair selected during initialization", pair=pair.value)
                await self._load_pair(pair)
        finally:
            self._initializing = False
            self._loading = False
            self._notify()

        return self.snapshot()

    def start(self) -> None:
        """Start the periodic rates refresh."""
        self.scheduler.start()

    async def stop(self) -> None:
        """Stop the timer, mark the session disconnected and release the client."""
        await self.scheduler.stop()
        self.machine.reset()
        self._notify()
        if self.api is not None:
            await self.api.aclose()
        self.logger.info("Orchestrator stopped")

    async def __aenter__(self) -> "SyncOrchestrator":
        try:
            await self.initialize()
        except BaseException:
            await self.stop()
            raise
        self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()

    # Intents

    async def select_pair(self, pair: Union[str, Pair]) -> None:
        """
        Track a new pair and fetch its history, news and forecast concurrently.

        Raises:
            ValueError: If the pair is unknown or not configured
        """
        pair = Pair.parse(pair)
        if pair not in self.pairs:
            raise ValueError(f"Pair not configured: {pair.value}")
        if pair == self._tracked_pair:
            return

        previous = self._tracked_pair
        self._tracked_pair = pair
        # Pair-scoped slices only ever hold data for the tracked pair
        self._history = ()
        self._news = ()
        self._forecast = None
        self.logger.info(
            "Tracked pair changed",
            from_pair=previous.value if previous else None,
            to_pair=pair.value
        )
        self._notify()

        if self._initializing:
            # Picked up by initialize() once loading ends
            return

        await self._load_pair(pair)

    async def request_refresh(self) -> None:
        """Manual refresh; never raises."""
        try:
            await self.refresh_rates()
        except Exception as e:
            self.logger.error("Manual refresh failed", error=str(e), exc_info=True)

    async def tick(self) -> None:
        """Timer entry point; refreshes rates only."""
        self.logger.debug("Refresh timer fired")
        await self.refresh_rates()

    # Fetches

    async def refresh_rates(self) -> Optional[SourceResult]:
        """
        Re-fetch the full rates map and drive the connection state.

        Returns:
            The applied SourceResult, or None when no data could be produced
        """
        self.machine.begin_attempt()
        self._notify()

        try:
            result = await self.rates_source.fetch()
        except SystemFailureError as e:
            self.logger.error(
                "Rates fetch failed without fallback",
                error=str(e),
                error_type=type(e).__name__
            )
            if self.machine.status != ConnectionStatus.DISCONNECTED:
                self.machine.record_failure(str(e))
                self._notify()
            return None

        if self.machine.status == ConnectionStatus.DISCONNECTED:
            self.logger.debug("Discarding rates result after shutdown")
            return None

        self._rates = dict(result.data)
        if result.ok:
            self._last_rate_fetch = self.clock()
        self.machine.record_result(used_fallback=not result.ok)
        self._notify()
        return result

    async def _load_pair(self, pair: Pair) -> None:
        await asyncio.gather(
            self._refresh_history(pair),
            self._refresh_news(pair),
            self._refresh_forecast(pair),
        )

    async def _load_pair_sequentially(self, pair: Pair) -> None:
        for refresh in (self._refresh_history, self._refresh_news, self._refresh_forecast):
            if self._tracked_pair != pair:
                self.logger.debug("Skipping fetches for deselected pair", pair=pair.value)
                return
            await refresh(pair)

    async def _refresh_history(self, pair: Pair) -> None:
        await self._apply_scoped(
            SourceKind.HISTORY,
            pair,
            lambda: self.history_source.fetch(pair, reference_rate=self._reference_rate(pair)),
            self._set_history,
        )

    async def _refresh_news(self, pair: Pair) -> None:
        await self._apply_scoped(
            SourceKind.NEWS,
            pair,
            lambda: self.news_source.fetch(pair),
            self._set_news,
        )

    async def _refresh_forecast(self, pair: Pair) -> None:
        await self._apply_scoped(
            SourceKind.FORECAST,
            pair,
            lambda: self.forecast_source.fetch(pair, reference_rate=self._reference_rate(pair)),
            self._set_forecast,
        )

    async def _apply_scoped(
        self,
        kind: SourceKind,
        pair: Pair,
        fetch: Callable[[], Awaitable[SourceResult]],
        apply: Callable[[Any], None]
    ) -> bool:
        """Run a pair-scoped fetch and apply it only if ``pair`` is still tracked."""
        try:
            result = await fetch()
        except SystemFailureError as e:
            self.logger.error(
                "Pair data fetch failed, slice left empty",
                source_kind=kind.value,
                pair=pair.value,
                error=str(e)
            )
            return False

        if pair != self._tracked_pair:
            self.logger.debug(
                "Discarding stale result",
                source_kind=kind.value,
                issued_for=pair.value,
                tracked_pair=self._tracked_pair.value if self._tracked_pair else None
            )
            return False

        apply(result.data)
        self._notify()
        return True

    def _set_history(self, data: tuple[HistoricalPoint, ...]) -> None:
        self._history = tuple(data)

    def _set_news(self, data: tuple[NewsArticle, ...]) -> None:
        self._news = tuple(data)

    def _set_forecast(self, data: Forecast) -> None:
        self._forecast = data

    def _reference_rate(self, pair: Pair) -> Optional[float]:
        quote = self._rates.get(pair)
        return quote.rate if quote else None

    # Readers

    @property
    def tracked_pair(self) -> Optional[Pair]:
        return self._tracked_pair

    @property
    def connection_status(self) -> ConnectionStatus:
        return self.machine.status

    def snapshot(self) -> SessionState:
        """Immutable copy of the current session."""
        return SessionState(
            rates_by_pair=MappingProxyType(dict(self._rates)),
            tracked_pair=self._tracked_pair,
            history=self._history,
            news=self._news,
            forecast=self._forecast,
            connection_status=self.machine.status,
            last_successful_rate_fetch=self._last_rate_fetch,
            loading=self._loading,
        )

    def view(self, now: Optional[datetime] = None) -> DashboardView:
        return self.analytics.build(self.snapshot(), now)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Receive a snapshot after every mutation.

        Returns:
            Function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        if not self._subscribers:
            return

        state = self.snapshot()
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception as e:
                self.logger.error(
                    "Subscriber callback failed",
                    callback=getattr(callback, "__name__", repr(callback)),
                    error=str(e),
                    exc_info=True
                )

"""Historical rate series source."""

from typing import Any, Optional

from ..config.defaults import HistoryParams
from ..data.models import HistoricalPoint, Pair, SourceKind, SourceResult
from ..data.normalizer import ResponseNormalizer
from ..fallback.generator import FallbackGenerator
from ..utils.time import Clock, utc_now
from .base import DataSourceClient
from .http import ApiClient


def history_path(pair: Pair) -> str:
    """Endpoint path for a pair's history; the pair keeps its slash."""
    return f"/exchange/{pair.value}/history"


class HistorySource(DataSourceClient):
    """``GET /exchange/{pair}/history?period&limit``."""

    kind = SourceKind.HISTORY

    def __init__(
        self,
        api: ApiClient,
        fallback: FallbackGenerator,
        params: Optional[HistoryParams] = None,
        normalizer: Optional[ResponseNormalizer] = None,
        clock: Clock = utc_now
    ) -> None:
        super().__init__(api, fallback, normalizer, clock)
        self.params = params or HistoryParams()

    async def fetch(
        self,
        pair: Pair,
        period: Optional[str] = None,
        limit: Optional[int] = None,
        reference_rate: Optional[float] = None
    ) -> SourceResult:
        """
        Fetch a pair's history, oldest point first.

        Args:
            pair: Pair to fetch
            period: Lookback window, defaults to config
            limit: Maximum number of points, defaults to config
            reference_rate: Center for fallback values, usually the current quote
        """
        return await super().fetch(
            pair,
            period=self.params.period if period is None else period,
            limit=self.params.limit if limit is None else limit,
            reference_rate=reference_rate,
        )

    async def _fetch_remote(
        self,
        pair: Pair,
        period: str = "24h",
        limit: int = 20,
        **params: Any
    ) -> tuple[HistoricalPoint, ...]:
        payload = await self.api.get_json(
            history_path(pair), params={"period": period, "limit": limit}
        )
        return self.normalizer.normalize_history(payload, limit)

    def _fallback_data(
        self,
        pair: Pair,
        limit: int = 20,
        reference_rate: Optional[float] = None,
        **params: Any
    ) -> tuple[HistoricalPoint, ...]:
        return self.fallback.history(pair, limit, reference_rate)

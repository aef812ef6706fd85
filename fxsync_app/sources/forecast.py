"""Short-horizon forecast source."""

from typing import Any, Optional

from ..config.defaults import ForecastParams
from ..data.models import Forecast, Pair, SourceKind, SourceResult
from ..data.normalizer import ResponseNormalizer
from ..fallback.generator import FallbackGenerator
from ..utils.time import Clock, utc_now
from .base import DataSourceClient
from .http import ApiClient

FORECAST_PATH = "/forecast"


class ForecastSource(DataSourceClient):
    """
    ``POST /forecast`` with ``{pair, model, horizon}``.

    The issue time is captured before the request; a response whose
    predictions are not strictly increasing and strictly after it is
    replaced wholesale by fallback output.
    """

    kind = SourceKind.FORECAST

    def __init__(
        self,
        api: ApiClient,
        fallback: FallbackGenerator,
        params: Optional[ForecastParams] = None,
        normalizer: Optional[ResponseNormalizer] = None,
        clock: Clock = utc_now
    ) -> None:
        super().__init__(api, fallback, normalizer, clock)
        self.params = params or ForecastParams()

    async def fetch(
        self,
        pair: Pair,
        model: Optional[str] = None,
        horizon: Optional[int] = None,
        reference_rate: Optional[float] = None
    ) -> SourceResult:
        return await super().fetch(
            pair,
            model=self.params.model if model is None else model,
            horizon=self.params.horizon if horizon is None else horizon,
            reference_rate=reference_rate,
        )

    async def _fetch_remote(
        self,
        pair: Pair,
        model: str = "ensemble",
        horizon: int = 12,
        **params: Any
    ) -> Forecast:
        issued_at = self.clock()
        payload = await self.api.post_json(
            FORECAST_PATH,
            {"pair": pair.value, "model": model, "horizon": horizon}
        )
        return self.normalizer.normalize_forecast(payload, pair, issued_at)

    def _fallback_data(
        self,
        pair: Pair,
        horizon: int = 12,
        reference_rate: Optional[float] = None,
        **params: Any
    ) -> Forecast:
        return self.fallback.forecast(pair, horizon, reference_rate)

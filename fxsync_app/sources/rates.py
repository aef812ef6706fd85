"""Live rate quotes source."""

from dataclasses import replace
from typing import Any, Iterable, Optional

from ..data.models import Pair, RateQuote, SourceKind, SourceResult
from ..data.normalizer import ResponseNormalizer
from ..fallback.generator import FallbackGenerator
from ..utils.time import Clock, utc_now
from .base import DataSourceClient, recover_with_fallback
from .http import ApiClient

RATES_PATH = "/rates"


class RatesSource(DataSourceClient):
    """``GET /rates`` for every configured pair, backfilling gaps per pair."""

    kind = SourceKind.RATES

    def __init__(
        self,
        api: ApiClient,
        fallback: FallbackGenerator,
        pairs: Iterable[Pair] = tuple(Pair),
        normalizer: Optional[ResponseNormalizer] = None,
        clock: Clock = utc_now
    ) -> None:
        super().__init__(api, fallback, normalizer, clock)
        self.pairs = tuple(pairs)

    async def fetch(self, pair: Optional[Pair] = None, **params: Any) -> SourceResult:
        """Fetch the full rates map; ``pair`` is accepted for interface symmetry."""
        backfilled: list[Pair] = []

        result = await recover_with_fallback(
            lambda: self._fetch_remote(pair, backfilled=backfilled),
            lambda: self._fallback_data(pair),
            kind=self.kind,
        )

        if result.ok and backfilled:
            self.logger.warning(
                "Backfilled missing quotes",
                pairs=[p.value for p in backfilled]
            )
            result = replace(result, backfilled=tuple(backfilled))
        return result

    async def _fetch_remote(
        self,
        pair: Optional[Pair],
        backfilled: Optional[list[Pair]] = None,
        **params: Any
    ) -> dict[Pair, RateQuote]:
        payload = await self.api.get_json(RATES_PATH)
        rates, filled = self.normalizer.normalize_rates(
            payload, self.pairs, self.fallback.rate_quote
        )
        if backfilled is not None:
            backfilled.extend(filled)
        return rates

    def _fallback_data(self, pair: Optional[Pair], **params: Any) -> dict[Pair, RateQuote]:
        return self.fallback.rates(self.pairs)

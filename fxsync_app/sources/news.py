"""Market news source."""

from typing import Any

from ..data.models import NewsArticle, Pair, SourceKind, SourceResult
from .base import DataSourceClient


def news_path(pair: Pair) -> str:
    return f"/news/{pair.value}"


class NewsSource(DataSourceClient):
    """``GET /news/{pair}``; articles without sentiment become neutral."""

    kind = SourceKind.NEWS

    async def fetch(self, pair: Pair, **params: Any) -> SourceResult:
        return await super().fetch(pair)

    async def _fetch_remote(self, pair: Pair, **params: Any) -> tuple[NewsArticle, ...]:
        payload = await self.api.get_json(news_path(pair))
        return self.normalizer.normalize_news(payload)

    def _fallback_data(self, pair: Pair, **params: Any) -> tuple[NewsArticle, ...]:
        return self.fallback.news(pair)

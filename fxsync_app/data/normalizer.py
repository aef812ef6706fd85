"""
Response normalization for the four remote sources.

The ResponseNormalizer converts decoded JSON bodies into canonical entities,
applying per-source repair rules (rate backfill, history ordering, neutral
sentiment, duplicate article removal) and then checking structural
invariants. Anything it cannot repair raises a DataQualityError so the
caller can substitute fallback data for the whole response.
"""

from datetime import datetime
from typing import Any, Callable, Iterable, Optional

import structlog

from ..errors import DataQualityError, MalformedDataError, MissingDataError
from .models import Forecast, HistoricalPoint, NewsArticle, Pair, RateQuote
from .parsers import (
    parse_historical_point,
    parse_model_info,
    parse_news_article,
    parse_prediction_point,
    parse_rate_quote,
    require_list,
    require_mapping,
)
from .validators import (
    validate_forecast,
    validate_history,
    validate_news,
    validate_rates,
)

logger = structlog.get_logger(__name__)

RateBackfill = Callable[[Pair], RateQuote]


class ResponseNormalizer:
    """Normalizes decoded source responses into canonical entities."""

    def normalize_rates(
        self,
        payload: Any,
        pairs: Iterable[Pair],
        backfill: RateBackfill
    ) -> tuple[dict[Pair, RateQuote], tuple[Pair, ...]]:
        """
        Normalize a ``{"rates": {pair: quote}}`` body.

        Configured pairs that are absent or individually malformed are filled
        by ``backfill`` rather than discarding the response.

        Returns:
            Tuple of (complete rates map, pairs that were backfilled)
        """
        body = require_mapping(payload, "rates response")
        raw_rates = body.get("rates")
        if raw_rates is None:
            raise MissingDataError("Rates response is missing 'rates'", data_type="rates")
        raw_rates = require_mapping(raw_rates, "rates")

        pairs = tuple(pairs)
        rates: dict[Pair, RateQuote] = {}
        backfilled: list[Pair] = []

        for pair in pairs:
            raw_quote = raw_rates.get(pair.value)
            if raw_quote is None:
                backfilled.append(pair)
                continue
            try:
                rates[pair] = parse_rate_quote(pair, raw_quote)
            except DataQualityError as e:
                logger.warning(
                    "Discarding malformed quote",
                    pair=pair.value,
                    error=str(e)
                )
                backfilled.append(pair)

        if not rates:
            raise MalformedDataError(
                "Rates response holds no usable quote for any configured pair",
                raw_data=repr(list(raw_rates))[:100]
            )

        for pair in backfilled:
            rates[pair] = backfill(pair)

        ordered = {pair: rates[pair] for pair in pairs}
        validate_rates(ordered, pairs)
        return ordered, tuple(backfilled)

    def normalize_history(self, payload: Any, limit: int) -> tuple[HistoricalPoint, ...]:
        """Normalize a ``{"data": [...]}`` body, sorted oldest to newest."""
        body = require_mapping(payload, "history response")
        raw_points = body.get("data")
        if raw_points is None:
            raise MissingDataError("History response is missing 'data'", data_type="data")
        raw_points = require_list(raw_points, "data")

        if len(raw_points) > limit:
            raise MalformedDataError(
                f"History has {len(raw_points)} points, limit is {limit}"
            )

        points = sorted(
            (parse_historical_point(raw) for raw in raw_points),
            key=lambda point: point.timestamp
        )
        validate_history(points, limit)
        return tuple(points)

    def normalize_news(self, payload: Any) -> tuple[NewsArticle, ...]:
        """Normalize an ``{"articles": [...]}`` body, keeping source order."""
        body = require_mapping(payload, "news response")
        raw_articles = body.get("articles")
        if raw_articles is None:
            raise MissingDataError("News response is missing 'articles'", data_type="articles")
        raw_articles = require_list(raw_articles, "articles")

        articles: list[NewsArticle] = []
        seen: set[str] = set()
        for raw in raw_articles:
            article = parse_news_article(raw)
            if article.id in seen:
                logger.warning("Dropping duplicate article", article_id=article.id)
                continue
            seen.add(article.id)
            articles.append(article)

        validate_news(articles)
        return tuple(articles)

    def normalize_forecast(
        self,
        payload: Any,
        pair: Pair,
        issued_at: datetime
    ) -> Forecast:
        """
        Normalize a forecast body.

        Predictions must already be strictly increasing and after
        ``issued_at``; they are not reordered.
        """
        body = require_mapping(payload, "forecast response")

        response_pair: Optional[Pair] = pair
        raw_pair = body.get("pair")
        if raw_pair is not None:
            try:
                response_pair = Pair.parse(raw_pair)
            except ValueError:
                raise MalformedDataError(f"Unknown forecast pair: {raw_pair!r}") from None

        raw_predictions = body.get("predictions")
        if raw_predictions is None:
            raise MissingDataError("Forecast response is missing 'predictions'",
                                   data_type="predictions")
        raw_predictions = require_list(raw_predictions, "predictions")

        raw_model_info = body.get("model_info")
        if raw_model_info is None:
            raise MissingDataError("Forecast response is missing 'model_info'",
                                   data_type="model_info")

        forecast = Forecast(
            pair=response_pair,
            predictions=tuple(parse_prediction_point(raw) for raw in raw_predictions),
            model_info=parse_model_info(raw_model_info),
        )
        validate_forecast(forecast, pair, issued_at)
        return forecast

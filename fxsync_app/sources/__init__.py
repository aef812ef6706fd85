"""
Remote data source module.

One client per source kind (rates, history, news, forecast). Each performs its
network call, normalizes the response and recovers failures with fallback data.
"""
from .base import DataSourceClient, recover_with_fallback
from .forecast import ForecastSource
from .history import HistorySource
from .http import ApiClient
from .news import NewsSource
from .rates import RatesSource

__all__ = [
    "ApiClient",
    "DataSourceClient",
    "ForecastSource",
    "HistorySource",
    "NewsSource",
    "RatesSource",
    "recover_with_fallback",
]

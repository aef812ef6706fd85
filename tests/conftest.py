"""Pytest configuration and shared fixtures."""

import inspect
import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import httpx
import pytest

from fxsync_app.config.defaults import FallbackParams
from fxsync_app.data.models import Pair
from fxsync_app.fallback.generator import SEED_QUOTES, FallbackGenerator
from fxsync_app.orchestrator import SyncOrchestrator
from fxsync_app.sources.http import ApiClient

BASE_URL = "http://localhost:5000/api"
FIXED_NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def iso(ts: datetime) -> str:
    return ts.strftime("%Y-%m-%dT%H:%M:%SZ")


class FakeApi:
    """
    In-process stand-in for the dashboard API, served through httpx.MockTransport.

    Routes map ``(method, path)`` to a JSON body, an HTTP status code, or a
    (possibly async) callable taking the request. Paths are given without the
    ``/api`` prefix of the base URL.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], Any] = {}
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def route(self, method: str, path: str, response: Any) -> None:
        self.routes[(method.upper(), path)] = response

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method.upper() and self._path(r) == path
        ]

    @staticmethod
    def _path(request: httpx.Request) -> str:
        path = request.url.path
        return path[len("/api"):] if path.startswith("/api") else path

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get((request.method, self._path(request)))

        if response is None:
            return httpx.Response(404, json={"error": "not found"})
        if isinstance(response, int):
            return httpx.Response(response)
        if callable(response):
            result = response(request)
            if inspect.isawaitable(result):
                result = await result
            if isinstance(result, httpx.Response):
                return result
            return httpx.Response(200, json=result)
        return httpx.Response(200, json=response)


def timeout(request: httpx.Request) -> httpx.Response:
    """Route handler that simulates a client timeout."""
    raise httpx.ReadTimeout("timed out", request=request)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def fallback(clock) -> FallbackGenerator:
    """Seeded fallback generator on the fixed clock."""
    return FallbackGenerator(FallbackParams(seed=7), clock=clock)


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def api_client(fake_api) -> ApiClient:
    return ApiClient(BASE_URL, timeout_seconds=1.0, transport=fake_api.transport)


@pytest.fixture
def rates_payload() -> Callable[..., dict[str, Any]]:
    """Factory for a ``/rates`` body covering the given pairs."""
    def build(pairs=tuple(Pair), timestamp: datetime = FIXED_NOW - timedelta(minutes=1)):
        return {
            "rates": {
                pair.value: {
                    "rate": SEED_QUOTES[pair][0],
                    "change": SEED_QUOTES[pair][1],
                    "timestamp": iso(timestamp),
                }
                for pair in pairs
            }
        }
    return build


@pytest.fixture
def history_payload() -> Callable[..., dict[str, Any]]:
    """Factory for a history body, newest point first."""
    def build(count: int = 5, rate: float = 1.05):
        return {
            "data": [
                {
                    "timestamp": iso(FIXED_NOW - timedelta(hours=i)),
                    "rate": rate + i * 0.001,
                    "volume": 1_000_000 + i,
                }
                for i in range(count)
            ]
        }
    return build


@pytest.fixture
def news_payload() -> Callable[..., dict[str, Any]]:
    """Factory for a news body; the second article carries no sentiment."""
    def build(prefix: str = "n"):
        return {
            "articles": [
                {
                    "id": f"{prefix}1",
                    "title": "Dollar firms on jobs data",
                    "content": "The dollar rose after payrolls beat expectations.",
                    "source": "Reuters",
                    "timestamp": iso(FIXED_NOW - timedelta(minutes=30)),
                    "sentiment": {"label": "positive", "score": 0.4},
                },
                {
                    "id": f"{prefix}2",
                    "title": "Euro steady ahead of ECB",
                    "content": "",
                    "source": "Bloomberg",
                    "timestamp": iso(FIXED_NOW - timedelta(hours=3)),
                },
            ]
        }
    return build


@pytest.fixture
def forecast_payload() -> Callable[..., dict[str, Any]]:
    """Factory for a forecast body issued after the fixed clock."""
    def build(pair: Pair = Pair.USD_EUR, steps: int = 3, rate: float = 1.05):
        return {
            "pair": pair.value,
            "predictions": [
                {
                    "timestamp": iso(FIXED_NOW + timedelta(hours=i + 1)),
                    "predicted": rate + i * 0.001,
                    "confidence": 0.85 - i * 0.02,
                }
                for i in range(steps)
            ],
            "model_info": {"accuracy": 0.847},
        }
    return build


@pytest.fixture
def make_orchestrator(fake_api, clock, fallback) -> Callable[..., SyncOrchestrator]:
    """Factory wiring an orchestrator to the fake API."""
    def build(config=None, fallback_generator=None):
        return SyncOrchestrator.create(
            config,
            transport=fake_api.transport,
            clock=clock,
            fallback=fallback_generator or fallback,
        )
    return build


@pytest.fixture
def timeout_route() -> Callable[[httpx.Request], httpx.Response]:
    return timeout


@pytest.fixture
def serve_all(fake_api, rates_payload, history_payload, news_payload, forecast_payload) -> FakeApi:
    """Fake API answering every endpoint for every pair with valid data."""
    fake_api.route("GET", "/rates", rates_payload())

    for pair in Pair:
        seed_rate = SEED_QUOTES[pair][0]
        fake_api.route("GET", f"/exchange/{pair.value}/history",
                       history_payload(5, rate=seed_rate))
        fake_api.route("GET", f"/news/{pair.value}",
                       news_payload(prefix=f"{pair.base}{pair.quote}-"))

    def forecast(request: httpx.Request) -> dict[str, Any]:
        pair = Pair.parse(json.loads(request.content)["pair"])
        return forecast_payload(pair, rate=SEED_QUOTES[pair][0])

    fake_api.route("POST", "/forecast", forecast)
    return fake_api

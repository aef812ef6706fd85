"""
End-to-end scenarios for the dashboard core.

Each test drives a full orchestrator over the fake API and checks the session
state a renderer would observe.
"""

import asyncio
import json
from dataclasses import replace

import pytest

from fxsync_app.analytics import display_value, percent_change
from fxsync_app.config.defaults import SchedulerParams, get_default_config
from fxsync_app.data.models import Pair, RateQuote
from fxsync_app.data.validators import validate_rates
from fxsync_app.state.models import ConnectionStatus


async def wait_for_requests(fake_api, count: int) -> None:
    for _ in range(1000):
        if len(fake_api.requests) >= count:
            return
        await asyncio.sleep(0.001)
    raise AssertionError(f"expected {count} requests, saw {len(fake_api.requests)}")


class TestRatesCompleteness:
    """After initialization every configured pair holds a valid quote."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rates_response", ["full", "partial", "down", "garbage"])
    async def test_every_pair_has_a_quote(self, serve_all, make_orchestrator, rates_payload,
                                          rates_response):
        if rates_response == "partial":
            serve_all.route("GET", "/rates", rates_payload(pairs=(Pair.USD_EUR, Pair.GBP_JPY)))
        elif rates_response == "down":
            serve_all.route("GET", "/rates", 503)
        elif rates_response == "garbage":
            serve_all.route("GET", "/rates", {"rates": "unavailable"})

        orchestrator = make_orchestrator()
        state = await orchestrator.initialize()

        assert set(state.rates_by_pair) == set(Pair)
        validate_rates(state.rates_by_pair, tuple(Pair))


class TestRatesTimeout:
    """Rates source timing out still yields a connected dashboard."""

    @pytest.mark.asyncio
    async def test_timeout_yields_full_fallback_map(self, serve_all, make_orchestrator,
                                                    timeout_route):
        serve_all.route("GET", "/rates", timeout_route)
        orchestrator = make_orchestrator()

        state = await orchestrator.initialize()

        assert len(state.rates_by_pair) == 6
        assert all(quote.rate > 0 for quote in state.rates_by_pair.values())
        assert state.connection_status == ConnectionStatus.CONNECTED
        assert state.last_successful_rate_fetch is None


class TestPairSwitchRace:
    """The most recently selected pair wins over late results."""

    @pytest.mark.asyncio
    async def test_late_results_for_previous_pair_are_discarded(self, serve_all,
                                                                make_orchestrator,
                                                                history_payload,
                                                                news_payload,
                                                                forecast_payload):
        orchestrator = make_orchestrator()
        await orchestrator.initialize()
        await orchestrator.select_pair("USD/JPY")
        release = asyncio.Event()

        def gated(body):
            async def handler(request):
                await release.wait()
                return body
            return handler

        serve_all.route("GET", "/exchange/USD/EUR/history", gated(history_payload(2)))
        serve_all.route("GET", "/news/USD/EUR", gated(news_payload(prefix="late-")))

        async def forecast(request):
            if b"USD/EUR" in request.content:
                await release.wait()
                return forecast_payload(Pair.USD_EUR)
            return forecast_payload(Pair.USD_GBP, rate=0.78)

        serve_all.route("POST", "/forecast", forecast)

        before = len(serve_all.requests)
        first = asyncio.create_task(orchestrator.select_pair("USD/EUR"))
        await wait_for_requests(serve_all, before + 3)
        await orchestrator.select_pair("USD/GBP")
        release.set()
        await first

        state = orchestrator.snapshot()
        assert state.tracked_pair == Pair.USD_GBP
        assert len(state.history) == 5
        assert [a.id for a in state.news] == ["USDGBP-1", "USDGBP-2"]
        assert state.forecast.pair == Pair.USD_GBP

    @pytest.mark.asyncio
    async def test_requests_are_tagged_with_selected_pair(self, serve_all, make_orchestrator):
        orchestrator = make_orchestrator()
        await orchestrator.initialize()
        before = len(serve_all.requests)

        await orchestrator.select_pair("USD/GBP")

        paths = sorted(r.url.path for r in serve_all.requests[before:])
        assert paths == [
            "/api/exchange/USD/GBP/history",
            "/api/forecast",
            "/api/news/USD/GBP",
        ]
        forecast_request = serve_all.calls("POST", "/forecast")[-1]
        assert json.loads(forecast_request.content)["pair"] == "USD/GBP"


class TestDisplayDerivation:
    """Derived values stay consistent with the raw quote."""

    @pytest.mark.asyncio
    async def test_usd_eur_card(self, serve_all, make_orchestrator, now):
        orchestrator = make_orchestrator()
        state = await orchestrator.initialize()

        quote = state.rates_by_pair[Pair.USD_EUR]
        assert quote.rate == 1.0545
        assert quote.change == 0.0023
        assert percent_change(quote) == pytest.approx(0.2182, abs=1e-3)
        assert display_value(quote.rate, Pair.USD_EUR) == "1.0545"

        card = orchestrator.view(now).rate_card
        assert card.rate == "1.0545"
        assert card.percent == "+0.22%"

    def test_jpy_precision(self, now):
        quote = RateQuote(Pair.USD_JPY, 149.8512, 0.45, now)
        assert display_value(quote.rate, quote.pair) == "149.85"


class TestOverlappingRefreshes:
    """Overlapping timer refreshes never leave a partial rates map."""

    @pytest.mark.asyncio
    async def test_two_overlapping_ticks(self, fake_api, make_orchestrator, rates_payload):
        slow = rates_payload()
        fast = rates_payload()
        for entry in fast["rates"].values():
            entry["rate"] *= 1.01
        calls = []

        async def rates(request):
            calls.append(1)
            if len(calls) == 1:
                await asyncio.sleep(0.05)
                return slow
            return fast

        fake_api.route("GET", "/rates", rates)
        orchestrator = make_orchestrator()

        await asyncio.gather(orchestrator.tick(), orchestrator.tick())

        state = orchestrator.snapshot()
        validate_rates(state.rates_by_pair, tuple(Pair))
        applied = {pair.value: quote.rate for pair, quote in state.rates_by_pair.items()}
        assert applied in (
            {k: v["rate"] for k, v in slow["rates"].items()},
            {k: v["rate"] for k, v in fast["rates"].items()},
        )
        assert state.connection_status == ConnectionStatus.CONNECTED

    @pytest.mark.asyncio
    async def test_scheduler_overlaps_with_short_interval(self, serve_all, make_orchestrator):
        config = replace(get_default_config(),
                         scheduler=SchedulerParams(refresh_interval_seconds=0.01))
        orchestrator = make_orchestrator(config)

        async with orchestrator:
            await asyncio.sleep(0.06)
            state = orchestrator.snapshot()

        assert len(serve_all.calls("GET", "/rates")) >= 3
        validate_rates(state.rates_by_pair, tuple(Pair))
        assert orchestrator.connection_status == ConnectionStatus.DISCONNECTED

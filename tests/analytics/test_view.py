"""Tests for the dashboard view model."""

from datetime import timedelta
from types import MappingProxyType

from fxsync_app.analytics import AnalyticsView, ChangeDirection, model_label
from fxsync_app.config.defaults import DisplayParams
from fxsync_app.data.models import Pair, RateQuote
from fxsync_app.state.models import ConnectionStatus, SessionState


def make_state(fallback, now, **overrides) -> SessionState:
    rates = dict(fallback.rates(tuple(Pair)))
    rates[Pair.USD_EUR] = RateQuote(Pair.USD_EUR, 1.0545, 0.0023, now - timedelta(minutes=2))
    values = dict(
        rates_by_pair=MappingProxyType(rates),
        tracked_pair=Pair.USD_EUR,
        history=fallback.history(Pair.USD_EUR, limit=4),
        news=fallback.news(Pair.USD_EUR),
        forecast=fallback.forecast(Pair.USD_EUR, horizon=3),
        connection_status=ConnectionStatus.CONNECTED,
        last_successful_rate_fetch=now - timedelta(hours=2),
    )
    values.update(overrides)
    return SessionState(**values)


class TestAnalyticsView:
    """Test view model construction from a snapshot."""

    def test_rate_card(self, fallback, now):
        view = AnalyticsView().build(make_state(fallback, now), now)

        card = view.rate_card
        assert card.pair == Pair.USD_EUR
        assert card.rate == "1.0545"
        assert card.change == "+0.0023"
        assert card.percent == "+0.22%"
        assert abs(card.percent_value - 0.2181) < 1e-3
        assert card.direction == ChangeDirection.UP
        assert card.updated == "2m ago"

    def test_history_and_forecast(self, fallback, now):
        view = AnalyticsView().build(make_state(fallback, now), now)

        assert len(view.history) == 4
        assert all(len(row.rate.split(".")[1]) == 4 for row in view.history)
        assert view.forecast.label == "Ensemble (84.7% accuracy)"
        assert [row.confidence for row in view.forecast.predictions] == ["85%", "83%", "81%"]

    def test_jpy_pair_uses_two_decimals(self, fallback, now):
        state = make_state(
            fallback, now,
            tracked_pair=Pair.USD_JPY,
            history=fallback.history(Pair.USD_JPY, limit=2),
            forecast=fallback.forecast(Pair.USD_JPY, horizon=2),
        )
        view = AnalyticsView().build(state, now)

        assert len(view.rate_card.rate.split(".")[1]) == 2
        assert all(len(row.rate.split(".")[1]) == 2 for row in view.history)
        assert all(len(row.predicted.split(".")[1]) == 2 for row in view.forecast.predictions)

    def test_news_capped(self, fallback, now):
        view = AnalyticsView(DisplayParams(news_display_limit=2)).build(
            make_state(fallback, now), now
        )

        assert [item.id for item in view.news] == ["fallback-USDEUR-1", "fallback-USDEUR-2"]
        assert view.news[0].published == "2h ago"
        assert view.news[0].sentiment == "neutral"

    def test_status_fields(self, fallback, now):
        state = make_state(fallback, now, loading=True, connection_status=ConnectionStatus.ERROR)
        view = AnalyticsView().build(state, now)

        assert view.loading is True
        assert view.connection_status == ConnectionStatus.ERROR
        assert view.last_updated == "2h ago"

    def test_empty_state(self, now):
        view = AnalyticsView().build(SessionState(), now)

        assert view.rate_card is None
        assert view.history == ()
        assert view.forecast is None
        assert view.news == ()
        assert view.last_updated == "N/A"

    def test_default_now_from_clock(self, fallback, now, clock):
        view = AnalyticsView(clock=clock).build(make_state(fallback, now))
        assert view.rate_card.updated == "2m ago"

    def test_model_label(self, fallback):
        forecast = fallback.forecast(Pair.USD_EUR, horizon=1)
        assert model_label(forecast) == "Ensemble (84.7% accuracy)"
        assert model_label(forecast, "arima") == "Arima (84.7% accuracy)"

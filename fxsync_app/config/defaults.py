"""Default configuration parameters for the dashboard synchronization core."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ApiParams:
    """Remote endpoint parameters. The base URL arrives already resolved."""
    base_url: str = "http://localhost:5000/api"
    timeout_seconds: float = 10.0
    user_agent: str = "fxsync-app/0.1"


@dataclass(frozen=True)
class PairParams:
    """Tracked currency pairs."""
    pairs: tuple[str, ...] = (
        "USD/EUR", "USD/GBP", "USD/JPY", "EUR/GBP", "EUR/JPY", "GBP/JPY",
    )
    default_pair: Optional[str] = "USD/EUR"


@dataclass(frozen=True)
class HistoryParams:
    """Historical series query parameters."""
    period: str = "24h"
    limit: int = 20


@dataclass(frozen=True)
class ForecastParams:
    """Forecast request parameters."""
    model: str = "ensemble"
    horizon: int = 12                  # Hours ahead


@dataclass(frozen=True)
class SchedulerParams:
    """Periodic rate refresh parameters."""
    refresh_interval_seconds: float = 30.0


@dataclass(frozen=True)
class DisplayParams:
    """View model parameters."""
    news_display_limit: int = 5


@dataclass(frozen=True)
class FallbackParams:
    """Synthetic data generation parameters."""
    seed: Optional[int] = None         # None = nondeterministic values
    rate_jitter_pct: float = 0.001     # Relative jitter around seed rate
    change_jitter_pct: float = 0.0005  # Relative jitter added to seed change
    history_jitter_pct: float = 0.005
    forecast_jitter_pct: float = 0.0025
    confidence_start: float = 0.85
    confidence_step: float = 0.02
    model_accuracy: float = 0.847
    volume_min: int = 1_000_000
    volume_max: int = 6_000_000        # Exclusive


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DashboardConfig:
    """Complete configuration."""
    api: ApiParams
    pairs: PairParams
    history: HistoryParams
    forecast: ForecastParams
    scheduler: SchedulerParams
    display: DisplayParams
    fallback: FallbackParams
    logging: LoggingParams


def get_default_config() -> DashboardConfig:
    """Get the default configuration instance."""
    return DashboardConfig(
        api=ApiParams(),
        pairs=PairParams(),
        history=HistoryParams(),
        forecast=ForecastParams(),
        scheduler=SchedulerParams(),
        display=DisplayParams(),
        fallback=FallbackParams(),
        logging=LoggingParams(),
    )

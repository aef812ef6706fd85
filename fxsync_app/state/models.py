"""
Session state data models.

This module defines the immutable snapshot handed to renderers and the
connection status enumeration driven by the connection state machine.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from ..data.models import Forecast, HistoricalPoint, NewsArticle, Pair, RateQuote


class ConnectionStatus(str, Enum):
    """Aggregate reachability as seen by the user."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass(frozen=True)
class ConnectionTransition:
    """Record of one connection state change."""
    from_state: ConnectionStatus
    to_state: ConnectionStatus
    trigger: str
    timestamp: datetime


def _empty_rates() -> Mapping[Pair, RateQuote]:
    return MappingProxyType({})


@dataclass(frozen=True)
class SessionState:
    """Read-only snapshot of the orchestrator-owned session."""

    # Market data
    rates_by_pair: Mapping[Pair, RateQuote] = field(default_factory=_empty_rates)
    tracked_pair: Optional[Pair] = None
    history: tuple[HistoricalPoint, ...] = ()
    news: tuple[NewsArticle, ...] = ()
    forecast: Optional[Forecast] = None

    # Health and lifecycle
    connection_status: ConnectionStatus = ConnectionStatus.DISCONNECTED
    last_successful_rate_fetch: Optional[datetime] = None
    loading: bool = False

    @property
    def current_quote(self) -> Optional[RateQuote]:
        """Quote for the tracked pair, if one has been fetched."""
        if self.tracked_pair is None:
            return None
        return self.rates_by_pair.get(self.tracked_pair)

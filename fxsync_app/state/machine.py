"""
Connection health state machine.

Driven exclusively by Rates fetch attempts:

    disconnected -> connecting -> connected | error

A fallback substitution still counts as connected since the user has data to
look at; only a broken fallback contract moves the machine to error.
Overlapping refreshes produce self-transitions, which are accepted silently.
"""

from collections import deque
from typing import Optional

from ..errors import StateTransitionError
from ..logging.config import get_state_logger, log_state_transition
from ..utils.time import Clock, utc_now
from .models import ConnectionStatus, ConnectionTransition

state_logger = get_state_logger(__name__)

ALLOWED_TRANSITIONS: dict[ConnectionStatus, frozenset[ConnectionStatus]] = {
    ConnectionStatus.DISCONNECTED: frozenset({ConnectionStatus.CONNECTING}),
    ConnectionStatus.CONNECTING: frozenset({
        ConnectionStatus.CONNECTING,
        ConnectionStatus.CONNECTED,
        ConnectionStatus.ERROR,
    }),
    ConnectionStatus.CONNECTED: frozenset({
        ConnectionStatus.CONNECTING,
        ConnectionStatus.CONNECTED,
        ConnectionStatus.ERROR,
    }),
    ConnectionStatus.ERROR: frozenset({
        ConnectionStatus.CONNECTING,
        ConnectionStatus.CONNECTED,
        ConnectionStatus.ERROR,
    }),
}


class ConnectionStateMachine:
    """Tracks connection status from Rates fetch outcomes."""

    def __init__(self, clock: Clock = utc_now, history_size: int = 50) -> None:
        self.logger = state_logger
        self.clock = clock
        self._status = ConnectionStatus.DISCONNECTED
        self.history: deque[ConnectionTransition] = deque(maxlen=history_size)

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    def begin_attempt(self) -> ConnectionStatus:
        """A Rates fetch has been issued."""
        return self._transition(ConnectionStatus.CONNECTING, "rates_fetch_issued")

    def record_result(self, used_fallback: bool = False) -> ConnectionStatus:
        """A Rates fetch produced data, real or synthetic."""
        trigger = "rates_fallback_used" if used_fallback else "rates_fetch_succeeded"
        return self._transition(ConnectionStatus.CONNECTED, trigger)

    def record_failure(self, reason: Optional[str] = None) -> ConnectionStatus:
        """A Rates fetch could not even produce fallback data."""
        return self._transition(
            ConnectionStatus.ERROR,
            "rates_fetch_failed",
            context={"reason": reason} if reason else None
        )

    def reset(self) -> ConnectionStatus:
        """Return to disconnected at shutdown."""
        if self._status != ConnectionStatus.DISCONNECTED:
            self._apply(ConnectionStatus.DISCONNECTED, "shutdown", None)
        return self._status

    def can_transition(self, target: ConnectionStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[self._status]

    def _transition(
        self,
        target: ConnectionStatus,
        trigger: str,
        context: Optional[dict] = None
    ) -> ConnectionStatus:
        if not self.can_transition(target):
            raise StateTransitionError(
                f"Invalid connection transition from {self._status.value} to {target.value}",
                current_state=self._status.value,
                attempted_transition=target.value
            )

        if target == self._status:
            self.logger.debug(
                "Connection state unchanged",
                state=target.value,
                trigger=trigger
            )
            return self._status

        self._apply(target, trigger, context)
        return self._status

    def _apply(self, target: ConnectionStatus, trigger: str, context: Optional[dict]) -> None:
        previous = self._status
        self._status = target
        self.history.append(ConnectionTransition(
            from_state=previous,
            to_state=target,
            trigger=trigger,
            timestamp=self.clock()
        ))
        log_state_transition(
            self.logger,
            from_state=previous.value,
            to_state=target.value,
            trigger=trigger,
            context=context
        )

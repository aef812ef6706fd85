"""Tests for the connection state machine."""

import pytest

from fxsync_app.errors import StateTransitionError
from fxsync_app.state.machine import ALLOWED_TRANSITIONS, ConnectionStateMachine
from fxsync_app.state.models import ConnectionStatus


@pytest.fixture
def machine(clock) -> ConnectionStateMachine:
    return ConnectionStateMachine(clock=clock)


class TestConnectionStateMachine:
    """Test transitions driven by rates fetch outcomes."""

    def test_initial_state(self, machine):
        assert machine.status == ConnectionStatus.DISCONNECTED
        assert len(machine.history) == 0

    def test_successful_fetch(self, machine):
        assert machine.begin_attempt() == ConnectionStatus.CONNECTING
        assert machine.record_result() == ConnectionStatus.CONNECTED

    def test_fallback_counts_as_connected(self, machine):
        machine.begin_attempt()
        assert machine.record_result(used_fallback=True) == ConnectionStatus.CONNECTED
        assert machine.history[-1].trigger == "rates_fallback_used"

    def test_failure_and_recovery(self, machine):
        machine.begin_attempt()
        assert machine.record_failure("fallback broken") == ConnectionStatus.ERROR

        machine.begin_attempt()
        assert machine.record_result() == ConnectionStatus.CONNECTED

    def test_result_without_attempt_is_rejected(self, machine):
        with pytest.raises(StateTransitionError) as exc_info:
            machine.record_result()

        assert exc_info.value.current_state == "disconnected"
        assert exc_info.value.attempted_transition == "connected"
        assert machine.status == ConnectionStatus.DISCONNECTED

    def test_failure_without_attempt_is_rejected(self, machine):
        with pytest.raises(StateTransitionError):
            machine.record_failure()

    def test_overlapping_refreshes_are_self_transitions(self, machine):
        machine.begin_attempt()
        machine.begin_attempt()
        machine.record_result()
        machine.record_result()

        assert machine.status == ConnectionStatus.CONNECTED
        assert [t.to_state for t in machine.history] == [
            ConnectionStatus.CONNECTING,
            ConnectionStatus.CONNECTED,
        ]

    def test_reset_from_any_state(self, machine):
        machine.begin_attempt()
        machine.record_failure()

        assert machine.reset() == ConnectionStatus.DISCONNECTED
        assert machine.history[-1].trigger == "shutdown"

    def test_reset_when_disconnected_is_noop(self, machine):
        machine.reset()
        assert len(machine.history) == 0

    def test_history_records_transitions(self, machine, now):
        machine.begin_attempt()
        machine.record_result()

        first, second = machine.history
        assert first.from_state == ConnectionStatus.DISCONNECTED
        assert first.to_state == ConnectionStatus.CONNECTING
        assert first.trigger == "rates_fetch_issued"
        assert first.timestamp == now
        assert second.from_state == ConnectionStatus.CONNECTING
        assert second.trigger == "rates_fetch_succeeded"

    def test_history_is_bounded(self, clock):
        machine = ConnectionStateMachine(clock=clock, history_size=3)
        for _ in range(5):
            machine.begin_attempt()
            machine.record_result()

        assert len(machine.history) == 3

    def test_transition_table(self):
        assert ALLOWED_TRANSITIONS[ConnectionStatus.DISCONNECTED] == {ConnectionStatus.CONNECTING}
        for status in (ConnectionStatus.CONNECTING, ConnectionStatus.CONNECTED,
                       ConnectionStatus.ERROR):
            assert ConnectionStatus.DISCONNECTED not in ALLOWED_TRANSITIONS[status]

    def test_transitions_are_logged(self, machine, monkeypatch):
        logged = []
        monkeypatch.setattr(
            "fxsync_app.state.machine.log_state_transition",
            lambda logger, **kwargs: logged.append(kwargs)
        )

        machine.begin_attempt()
        machine.begin_attempt()

        assert logged == [{
            "from_state": "disconnected",
            "to_state": "connecting",
            "trigger": "rates_fetch_issued",
            "context": None,
        }]

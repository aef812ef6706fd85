"""Unit tests for the periodic refresh scheduler."""

import asyncio

import pytest

from fxsync_app.scheduler import RefreshScheduler


class TestRefreshScheduler:
    """Test the refresh loop lifecycle."""

    def test_interval_must_be_positive(self):
        async def noop():
            pass

        with pytest.raises(ValueError):
            RefreshScheduler(noop, interval=0)

    @pytest.mark.asyncio
    async def test_ticks_until_stopped(self):
        ticks = []

        async def tick():
            ticks.append(1)

        scheduler = RefreshScheduler(tick, interval=0.01)
        scheduler.start()
        assert scheduler.running

        await asyncio.sleep(0.08)
        await scheduler.stop()
        count = len(ticks)
        await asyncio.sleep(0.03)

        assert count >= 2
        assert len(ticks) == count
        assert not scheduler.running

    @pytest.mark.asyncio
    async def test_failing_tick_keeps_loop_alive(self):
        ticks = []

        async def tick():
            ticks.append(1)
            raise RuntimeError("refresh failed")

        scheduler = RefreshScheduler(tick, interval=0.01)
        scheduler.start()
        await asyncio.sleep(0.08)

        assert scheduler.running
        assert len(ticks) >= 2
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self):
        async def noop():
            pass

        scheduler = RefreshScheduler(noop, interval=10)
        scheduler.start()
        task = scheduler._task
        scheduler.start()

        assert scheduler._task is task
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        async def noop():
            pass

        scheduler = RefreshScheduler(noop, interval=10)
        await scheduler.stop()
        assert not scheduler.running

    @pytest.mark.asyncio
    async def test_first_tick_waits_for_interval(self):
        ticks = []

        async def tick():
            ticks.append(1)

        scheduler = RefreshScheduler(tick, interval=10)
        scheduler.start()
        await asyncio.sleep(0.02)

        assert ticks == []
        await scheduler.stop()

"""
Periodic rates refresh task.

The timer is an explicit asyncio task with a start and stop handle. A tick
that raises is logged and the loop keeps going.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from .logging.config import get_logger

logger = get_logger(__name__)


class RefreshScheduler:
    """Runs ``callback`` every ``interval`` seconds until stopped."""

    def __init__(
        self,
        callback: Callable[[], Awaitable[object]],
        interval: float = 30.0
    ) -> None:
        if interval <= 0:
            raise ValueError("Refresh interval must be positive")
        self.callback = callback
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the refresh loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="fxsync-refresh")
        logger.info("Refresh scheduler started", interval_seconds=self.interval)

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if self._task is None:
            return

        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Refresh scheduler stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.callback()
            except Exception as e:
                logger.error(
                    "Scheduled refresh failed",
                    error=str(e),
                    exc_info=True
                )

"""
Cancellable interval timer running on the asyncio event loop
"""
import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class IntervalTimer:
    """
    Calls ``callback`` every ``interval`` seconds until cancelled.

    The first call happens one full interval after ``start()``. The callback
    may cancel the timer itself; no further calls happen after that.
    """

    def __init__(self, interval: float, callback: Callable[[], None]):
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")
        self.interval = interval
        self.callback = callback
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking. Needs a running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.callback()
            except Exception:
                logger.exception("Timer callback failed, stopping timer")
                self._task = None
                return

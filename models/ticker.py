"""Periodic tick source for the focus timer."""

import asyncio
import logging
from typing import Optional

from models.timer import FocusTimer

logger = logging.getLogger(__name__)


class TimerLoop:
    """Background asyncio task that ticks a FocusTimer at a fixed interval.

    Does NOT contain timer logic - all work is delegated to FocusTimer.tick().
    Errors raised by a tick are logged and the loop keeps running.

    Attributes:
        timer: The FocusTimer to drive.
        tick_interval: Seconds between ticks (default 1s).
        is_running: Whether the loop task is active.
    """

    def __init__(self, timer: FocusTimer, tick_interval: float = 1.0) -> None:
        """Initialize the loop.

        Args:
            timer: The FocusTimer to drive.
            tick_interval: Seconds between ticks.
        """
        if tick_interval <= 0:
            raise ValueError(f"tick_interval must be positive, got {tick_interval}")
        self.timer = timer
        self.tick_interval = tick_interval

        self._task: Optional[asyncio.Task] = None
        self.is_running = False

    def start(self) -> None:
        """Start the loop on the running event loop.

        Raises:
            RuntimeError: If the loop is already running.
        """
        if self.is_running:
            raise RuntimeError("Timer loop is already running")

        self.is_running = True
        self._task = asyncio.create_task(self._run_loop())

        logger.info(f"TimerLoop started (interval {self.tick_interval}s)")

    async def stop(self) -> None:
        """Cancel the loop task and wait for it to finish."""
        if not self.is_running:
            return

        task = self._task
        self.is_running = False
        self._task = None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        logger.info("TimerLoop stopped")

    async def _run_loop(self) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)

            # Stopped timers ignore ticks; skip the call entirely
            if not self.timer.running:
                continue

            try:
                self.timer.tick()
            except Exception as e:
                logger.error(f"Error during timer tick: {e}", exc_info=True)

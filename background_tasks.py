import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ClockTask:
    """Calls `on_tick` with the current time every `interval` seconds."""

    def __init__(
        self,
        on_tick: Callable[[datetime], None],
        interval: float = 1.0,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.on_tick = on_tick
        self.interval = interval
        self.now = now
        self.running = False
        self._task: Optional[asyncio.Task] = None

    def start(self) -> asyncio.Task:
        """Schedule the ticking loop on the running event loop."""
        if self._task is not None and not self._task.done():
            return self._task
        self.running = True
        self._task = asyncio.create_task(self._run())
        logger.debug(f"Clock started ({self.interval}s interval)")
        return self._task

    async def _run(self):
        while self.running:
            await asyncio.sleep(self.interval)
            if self.running:
                self.on_tick(self.now())

    async def stop(self):
        """Stop ticking; once this returns `on_tick` is never called again."""
        self.running = False
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            logger.debug("Clock task cancelled")
        self._task = None

import asyncio
from typing import Callable, Optional

from timekeeper.utils.logging_handler import setup_logger

logger = setup_logger(__name__)


class TickSource:
    """
    Periodic wake-up for one time tool.

    Runs as a task on the event loop, so every handler call finishes before the
    next one starts and never overlaps with other work on the loop. The period is
    only a wake-up interval; handlers must not treat it as elapsed time.
    """

    def __init__(self, period_ms: int, handler: Callable[[], None], name: str = "tick"):
        if period_ms <= 0:
            raise ValueError("Tick period must be positive")
        self.period_ms = period_ms
        self.handler = handler
        self.name = name
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self):
        """Runs the handler once. Handler errors are logged, never raised."""
        try:
            self.handler()
        except Exception:
            logger.exception(f"Tick handler '{self.name}' failed")

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        if self.is_running:
            logger.warning(f"Tick source '{self.name}' is already running.")
            return
        loop = loop or asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name=f"tick-{self.name}")
        logger.info(f"Tick source '{self.name}' started ({self.period_ms} ms).")

    def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        logger.info(f"Tick source '{self.name}' stopped.")

    async def _run(self):
        period = self.period_ms / 1000
        while True:
            self.tick()
            await asyncio.sleep(period)

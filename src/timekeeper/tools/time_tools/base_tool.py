from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from timekeeper.core.ports.clock_port import WallClock
from timekeeper.utils import Event
from timekeeper.utils.logging_handler import setup_logger

logger = setup_logger(__name__)


class TimeTool(ABC):
    """
    An abstract base class for the tick-driven time tools (stopwatch, timer,
    alarm scheduler, clocks).

    A tool never counts ticks. It keeps wall-clock anchors and recomputes every
    derived duration from the reading it is handed, so a late or skipped tick
    only delays a notification, it never skews the time shown.
    """

    def __init__(self, clock: WallClock):
        """Initializes the tool with the wall clock and its render event."""
        self.clock = clock
        self.on_tick = Event()

    def _now(self, now: Optional[datetime]) -> datetime:
        """Reads the clock once per operation unless the caller already did."""
        return now if now is not None else self.clock.now()

    def _reject(self, action: str, reason: str):
        logger.warning(f"{self.__class__.__name__}: ignoring {action} ({reason}).")

    @abstractmethod
    def tick(self, now: Optional[datetime] = None):
        """
        Re-evaluates time-dependent state against `now`.
        Called by a tick source; returns the effects the tick produced.
        """
        pass

    @abstractmethod
    def get_status(self, now: Optional[datetime] = None) -> dict:
        """
        Returns a snapshot of the tool's state at `now` as a plain dictionary.
        Side-effect free.
        """
        pass

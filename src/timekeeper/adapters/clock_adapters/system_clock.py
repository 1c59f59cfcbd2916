import datetime
import threading
from typing import Optional

from timekeeper.core.ports.clock_port import WallClock
from timekeeper.utils.time_conversions import shift_ms


class SystemWallClock(WallClock):
    """Reads the operating system clock in the machine's local timezone."""

    def now(self) -> datetime.datetime:
        return datetime.datetime.now().astimezone()


class ManualWallClock(WallClock):
    """A clock that only moves when told to. Used for simulations and tests."""

    def __init__(self, start: Optional[datetime.datetime] = None):
        if start is None:
            start = datetime.datetime.now().astimezone()
        if start.tzinfo is None:
            raise ValueError("ManualWallClock needs a timezone-aware start time")
        self._now = start
        self._lock = threading.Lock()

    def now(self) -> datetime.datetime:
        with self._lock:
            return self._now

    def set(self, reading: datetime.datetime):
        with self._lock:
            self._now = reading

    def advance(self, ms: int = 0, seconds: float = 0, minutes: float = 0, days: float = 0) -> datetime.datetime:
        total_ms = ms + int(seconds * 1000) + int(minutes * 60000) + int(days * 86400000)
        with self._lock:
            self._now = shift_ms(self._now, total_ms)
            return self._now

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from timekeeper.core.ports.clock_port import WallClock
from timekeeper.tools.time_tools.base_tool import TimeTool
from timekeeper.utils import Event
from timekeeper.utils.logging_handler import setup_logger
from timekeeper.utils.time_conversions import elapsed_ms, format_stopwatch_time

logger = setup_logger(__name__)


@dataclass(frozen=True)
class LapRecord:
    index: int
    duration_ms: int

    def to_dict(self) -> dict:
        return {
            "lap": self.index,
            "duration_ms": self.duration_ms,
            "duration_formatted": format_stopwatch_time(self.duration_ms),
        }


@dataclass
class StopwatchState:
    accumulated_elapsed_ms: int = 0
    is_running: bool = False
    run_anchor: Optional[datetime] = None
    # Elapsed reading at the last lap; never moves backwards.
    last_lap_mark_ms: int = 0
    # Most recent lap first.
    laps: List[LapRecord] = field(default_factory=list)


class Stopwatch(TimeTool):
    """
    Elapsed-time accumulator with lap capture.

    While running, elapsed time is the accumulated total plus the distance from
    the run anchor to `now`. Calls that do not fit the current state (lap while
    stopped, reset while running, a second start) are ignored.
    """

    def __init__(self, clock: WallClock):
        super().__init__(clock)
        self.state = StopwatchState()

        self.on_start = Event()
        self.on_stop = Event()
        self.on_lap = Event()
        self.on_reset = Event()

    @property
    def is_running(self) -> bool:
        return self.state.is_running

    @property
    def laps(self) -> List[LapRecord]:
        return list(self.state.laps)

    def elapsed(self, now: Optional[datetime] = None) -> int:
        now = self._now(now)
        if self.state.is_running:
            return self.state.accumulated_elapsed_ms + max(0, elapsed_ms(now, self.state.run_anchor))
        return self.state.accumulated_elapsed_ms

    def start(self, now: Optional[datetime] = None) -> bool:
        if self.state.is_running:
            self._reject("start", "already running")
            return False
        self.state.run_anchor = self._now(now)
        self.state.is_running = True
        self.on_start.emit()
        logger.info("Stopwatch started.")
        return True

    def stop(self, now: Optional[datetime] = None) -> bool:
        if not self.state.is_running:
            self._reject("stop", "not running")
            return False
        self.state.accumulated_elapsed_ms = self.elapsed(self._now(now))
        self.state.run_anchor = None
        self.state.is_running = False
        self.on_stop.emit(elapsed_ms=self.state.accumulated_elapsed_ms)
        logger.info(f"Stopwatch stopped at {format_stopwatch_time(self.state.accumulated_elapsed_ms)}.")
        return True

    def lap(self, now: Optional[datetime] = None) -> Optional[LapRecord]:
        if not self.state.is_running:
            self._reject("lap", "not running")
            return None
        current = self.elapsed(self._now(now))
        last_mark = self.state.last_lap_mark_ms
        record = LapRecord(index=len(self.state.laps) + 1, duration_ms=max(0, current - last_mark))
        self.state.last_lap_mark_ms = max(last_mark, current)
        self.state.laps.insert(0, record)
        self.on_lap.emit(lap=record, all_laps=self.laps)
        logger.info(f"Lap {record.index} recorded: {format_stopwatch_time(record.duration_ms)}.")
        return record

    def reset(self) -> bool:
        # Reset is unreachable mid-run; the lap button takes its place.
        if self.state.is_running:
            self._reject("reset", "running")
            return False
        self.state = StopwatchState()
        self.on_reset.emit(elapsed_ms=0, elapsed_formatted=format_stopwatch_time(0))
        logger.info("Stopwatch reset.")
        return True

    def toggle(self, now: Optional[datetime] = None) -> bool:
        """Start/stop button."""
        if self.state.is_running:
            return self.stop(now)
        return self.start(now)

    def lap_or_reset(self, now: Optional[datetime] = None):
        """Lap/reset button: laps while running, resets while stopped."""
        if self.state.is_running:
            return self.lap(now)
        return self.reset()

    def tick(self, now: Optional[datetime] = None):
        if not self.state.is_running:
            return []
        current = self.elapsed(now)
        self.on_tick.emit(elapsed_ms=current, elapsed_formatted=format_stopwatch_time(current))
        return []

    def get_status(self, now: Optional[datetime] = None) -> dict:
        current = self.elapsed(now)
        return {
            "is_running": self.state.is_running,
            "elapsed_ms": current,
            "elapsed_formatted": format_stopwatch_time(current),
            "laps": [record.to_dict() for record in self.state.laps],
        }

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional

from timekeeper.core.effects import Effect, PlaySound, StopSound
from timekeeper.core.ports.clock_port import WallClock
from timekeeper.tools.time_tools.base_tool import TimeTool
from timekeeper.tools.time_tools.sounds import DEFAULT_SOUND, sound_name
from timekeeper.utils import Event
from timekeeper.utils.logging_handler import setup_logger
from timekeeper.utils.time_conversions import (
    elapsed_ms,
    format_ms_to_hms,
    parse_timer_digits,
    shift_ms,
)

logger = setup_logger(__name__)

MAX_INPUT_DIGITS = 6
DEFAULT_INPUT = "500"

PRESETS = [
    {"label": "1 min", "value": "100"},
    {"label": "5 min", "value": "500"},
    {"label": "10 min", "value": "1000"},
    {"label": "30 min", "value": "3000"},
]


class TimerPhase(Enum):
    SETUP = "setup"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass
class TimerState:
    phase: TimerPhase = TimerPhase.SETUP
    configured_duration_ms: int = 0
    deadline: Optional[datetime] = None
    remaining_at_pause_ms: Optional[int] = None
    # Duration the current run started with, for the progress ring.
    run_duration_ms: int = 0


class Timer(TimeTool):
    """
    Single-shot countdown to a deadline.

    Phases: Setup -> Running -> (Paused -> Running)* -> Finished -> Setup.
    Completion is detected on ticks: the first tick at or after the deadline
    moves the timer to Finished and asks for looping playback. Dismissing a
    finished timer clears the configured duration back to zero.
    """

    def __init__(self, clock: WallClock, preferences=None, initial_input: str = DEFAULT_INPUT):
        super().__init__(clock)
        self.preferences = preferences
        self.state = TimerState()
        self._input = ""
        self._set_input(initial_input)
        self.sound_ref = preferences.load_timer_sound() if preferences else DEFAULT_SOUND

        self.on_start = Event()
        self.on_pause = Event()
        self.on_resume = Event()
        self.on_finished = Event()
        self.on_dismiss = Event()

    @property
    def phase(self) -> TimerPhase:
        return self.state.phase

    @property
    def input_digits(self) -> str:
        return self._input

    def _set_input(self, digits: str):
        clean = "".join(ch for ch in str(digits) if ch.isdigit())[:MAX_INPUT_DIGITS]
        self._input = clean or "0"
        self.state.configured_duration_ms = parse_timer_digits(self._input) * 1000

    # --- Reads ---

    def remaining(self, now: Optional[datetime] = None) -> int:
        phase = self.state.phase
        if phase == TimerPhase.RUNNING:
            return max(0, elapsed_ms(self.state.deadline, self._now(now)))
        if phase == TimerPhase.PAUSED:
            return self.state.remaining_at_pause_ms
        if phase == TimerPhase.SETUP:
            return self.state.configured_duration_ms
        return 0

    def get_status(self, now: Optional[datetime] = None) -> dict:
        remaining = self.remaining(now)
        run_duration = self.state.run_duration_ms
        progress = 0.0
        if run_duration > 0 and self.state.phase in (TimerPhase.RUNNING, TimerPhase.PAUSED):
            progress = round(remaining / run_duration * 100, 2)
        return {
            "phase": self.state.phase.value,
            "input": self._input,
            "configured_duration_ms": self.state.configured_duration_ms,
            "remaining_ms": remaining,
            "remaining_formatted": format_ms_to_hms(remaining),
            "progress": progress,
            "is_ringing": self.state.phase == TimerPhase.FINISHED,
            "sound": sound_name(self.sound_ref),
        }

    # --- Configuration (Setup only) ---

    def enter_digit(self, key: str) -> List[Effect]:
        """Keypad press: a digit or 'del'. Any key dismisses a ringing timer first."""
        effects = self._dismiss_if_finished()
        if self.state.phase != TimerPhase.SETUP:
            self._reject("digit entry", f"phase is {self.state.phase.value}")
            return effects
        if key == "del":
            self._set_input(self._input[:-1])
        elif len(key) == 1 and key.isdigit():
            if self._input == "0":
                self._set_input(key)
            elif len(self._input) < MAX_INPUT_DIGITS:
                self._set_input(self._input + key)
        else:
            self._reject("digit entry", f"unknown key {key!r}")
        return effects

    def apply_preset(self, value: str) -> List[Effect]:
        effects = self._dismiss_if_finished()
        if self.state.phase != TimerPhase.SETUP:
            self._reject("preset", f"phase is {self.state.phase.value}")
            return effects
        self._set_input(value)
        return effects

    def set_sound(self, sound_ref: str):
        self.sound_ref = sound_ref
        if self.preferences:
            self.preferences.save_timer_sound(sound_ref)

    # --- Transitions ---

    def start(self, now: Optional[datetime] = None) -> List[Effect]:
        if self.state.phase != TimerPhase.SETUP:
            self._reject("start", f"phase is {self.state.phase.value}")
            return []
        duration = self.state.configured_duration_ms
        if duration <= 0:
            self._reject("start", "no duration configured")
            return []
        self.state.deadline = shift_ms(self._now(now), duration)
        self.state.run_duration_ms = duration
        self.state.phase = TimerPhase.RUNNING
        self.on_start.emit(duration_ms=duration)
        logger.info(f"Timer started for {format_ms_to_hms(duration)}.")
        return []

    def pause(self, now: Optional[datetime] = None) -> List[Effect]:
        if self.state.phase != TimerPhase.RUNNING:
            self._reject("pause", f"phase is {self.state.phase.value}")
            return []
        now = self._now(now)
        # A deadline that already passed finishes instead of freezing at zero.
        effects = self.tick(now)
        if self.state.phase == TimerPhase.FINISHED:
            return effects
        self.state.remaining_at_pause_ms = max(0, elapsed_ms(self.state.deadline, now))
        self.state.deadline = None
        self.state.phase = TimerPhase.PAUSED
        self.on_pause.emit(remaining_ms=self.state.remaining_at_pause_ms)
        logger.info(f"Timer paused with {format_ms_to_hms(self.state.remaining_at_pause_ms)} left.")
        return effects

    def resume(self, now: Optional[datetime] = None) -> List[Effect]:
        if self.state.phase != TimerPhase.PAUSED:
            self._reject("resume", f"phase is {self.state.phase.value}")
            return []
        self.state.deadline = shift_ms(self._now(now), self.state.remaining_at_pause_ms)
        self.state.remaining_at_pause_ms = None
        self.state.phase = TimerPhase.RUNNING
        self.on_resume.emit()
        logger.info("Timer resumed.")
        return []

    def dismiss(self) -> List[Effect]:
        """Stop button of a ringing timer: back to Setup with the input cleared."""
        if self.state.phase != TimerPhase.FINISHED:
            self._reject("dismiss", f"phase is {self.state.phase.value}")
            return []
        self.state = TimerState()
        self._set_input("0")
        self.on_dismiss.emit()
        logger.info("Timer alarm dismissed.")
        return [StopSound()]

    def reset(self) -> List[Effect]:
        was_ringing = self.state.phase == TimerPhase.FINISHED
        self.state = TimerState()
        self._set_input("0")
        logger.info("Timer reset.")
        return [StopSound()] if was_ringing else []

    def toggle(self, now: Optional[datetime] = None) -> List[Effect]:
        """Start/pause button."""
        phase = self.state.phase
        if phase == TimerPhase.FINISHED:
            return self.dismiss()
        if phase == TimerPhase.RUNNING:
            return self.pause(now)
        if phase == TimerPhase.PAUSED:
            return self.resume(now)
        return self.start(now)

    def tick(self, now: Optional[datetime] = None) -> List[Effect]:
        if self.state.phase != TimerPhase.RUNNING:
            return []
        now = self._now(now)
        remaining = max(0, elapsed_ms(self.state.deadline, now))
        if remaining == 0:
            self.state.phase = TimerPhase.FINISHED
            self.state.deadline = None
            self.on_finished.emit()
            logger.info("Timer finished!")
            return [PlaySound(self.sound_ref, loop=True)]
        self.on_tick.emit(remaining_ms=remaining, remaining_formatted=format_ms_to_hms(remaining))
        return []

    def _dismiss_if_finished(self) -> List[Effect]:
        if self.state.phase == TimerPhase.FINISHED:
            return self.dismiss()
        return []

# core/surface.py
import asyncio
from typing import Callable, Dict, List, Optional

from timekeeper.core.effects import Effect, EffectDispatcher, StopSound
from timekeeper.core.ports.assistant_port import Assistant
from timekeeper.core.ports.audio_port import AudioPlayer
from timekeeper.core.ports.clock_port import WallClock
from timekeeper.core.ports.store_port import KeyValueStore
from timekeeper.core.repositories import AlarmRepository, PreferencesRepository, WorldClockRepository
from timekeeper.tools.time_tools.alarm import AlarmScheduler
from timekeeper.tools.time_tools.clock import DigitalClock, WorldClockBoard
from timekeeper.tools.time_tools.stopwatch import Stopwatch
from timekeeper.tools.time_tools.tick_source import TickSource
from timekeeper.tools.time_tools.timer import Timer
from timekeeper.utils.config import Settings
from timekeeper.utils.logging_handler import setup_logger

logger = setup_logger(__name__)

ASSISTANT_UNAVAILABLE = "Sorry, the assistant is not configured."


class TimeSurface:
    """
    Owns the time tools and their collaborators.

    Every user action and every tick goes through here so that the effects a tool
    returns reach the right audio channel. The timer and the alarm scheduler each
    get their own channel.
    """

    def __init__(
        self,
        clock: WallClock,
        store: KeyValueStore,
        audio_factory: Callable[[], AudioPlayer],
        settings: Optional[Settings] = None,
        assistant: Optional[Assistant] = None,
    ):
        self.clock = clock
        self.settings = settings or Settings()
        self.assistant = assistant

        preferences = PreferencesRepository(store)
        self.stopwatch = Stopwatch(clock)
        self.timer = Timer(clock, preferences=preferences)
        self.alarms = AlarmScheduler(clock, repository=AlarmRepository(store))
        self.world_clock = WorldClockBoard(
            clock, repository=WorldClockRepository(store), local_timezone=self.settings.local_timezone
        )
        self.digital_clock = DigitalClock(clock, preferences=preferences)

        self.timer_audio = EffectDispatcher(audio_factory(), channel="timer")
        self.alarm_audio = EffectDispatcher(audio_factory(), channel="alarm")

        self.tick_sources: Dict[str, TickSource] = {
            "stopwatch": TickSource(self.settings.stopwatch_tick_ms, self.tick_stopwatch, name="stopwatch"),
            "timer": TickSource(self.settings.timer_tick_ms, self.tick_timer, name="timer"),
            "alarms": TickSource(self.settings.alarm_tick_ms, self.tick_alarms, name="alarms"),
            "clocks": TickSource(self.settings.clock_tick_ms, self.tick_clocks, name="clocks"),
        }

    # --- Lifecycle ---

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        for source in self.tick_sources.values():
            source.start(loop)
        logger.info("Time surface started.")

    def stop(self):
        # Tool state stays in memory; a later start recomputes from a fresh reading.
        for source in self.tick_sources.values():
            source.stop()
        for channel in (self.timer_audio, self.alarm_audio):
            if channel.playing:
                channel.dispatch([StopSound()])
        logger.info("Time surface stopped.")

    # --- Tick handlers ---

    def tick_stopwatch(self):
        self.stopwatch.tick(self.clock.now())

    def tick_timer(self):
        self.timer_audio.dispatch(self.timer.tick(self.clock.now()))

    def tick_alarms(self):
        self.alarm_audio.dispatch(self.alarms.tick(self.clock.now()))

    def tick_clocks(self):
        now = self.clock.now()
        self.digital_clock.tick(now)
        self.world_clock.tick(now)

    # --- Timer actions ---

    def _timer(self, effects: List[Effect]) -> dict:
        self.timer_audio.dispatch(effects)
        return self.timer.get_status()

    def timer_toggle(self) -> dict:
        return self._timer(self.timer.toggle(self.clock.now()))

    def timer_key(self, key: str) -> dict:
        return self._timer(self.timer.enter_digit(key))

    def timer_preset(self, value: str) -> dict:
        return self._timer(self.timer.apply_preset(value))

    def timer_dismiss(self) -> dict:
        return self._timer(self.timer.dismiss())

    def timer_reset(self) -> dict:
        return self._timer(self.timer.reset())

    # --- Alarm actions ---

    def alarm_dismiss(self) -> dict:
        self.alarm_audio.dispatch(self.alarms.dismiss(self.clock.now()))
        return self.alarms.get_status()

    # --- Assistant ---

    def ask(self, prompt: str) -> str:
        if self.assistant is None:
            return ASSISTANT_UNAVAILABLE
        return self.assistant.respond(prompt)

from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional, Tuple

from timekeeper.core.effects import Effect, PlaySound, StopSound
from timekeeper.core.ports.clock_port import WallClock
from timekeeper.tools.time_tools.base_tool import TimeTool
from timekeeper.tools.time_tools.sounds import DEFAULT_SOUND, sound_name
from timekeeper.utils import Event
from timekeeper.utils.logging_handler import setup_logger
from timekeeper.utils.time_conversions import (
    clamp_hour24_input,
    clamp_minute_input,
    format_alarm_time,
    format_time_of_day,
    minute_bucket,
    to_24_hour,
)

logger = setup_logger(__name__)


@dataclass(frozen=True)
class AlarmEntry:
    id: int
    hour: int
    minute: int
    label: str = "Alarm"
    enabled: bool = True
    sound_ref: str = DEFAULT_SOUND

    @property
    def time_of_day(self) -> Tuple[int, int]:
        return self.hour, self.minute

    @property
    def time(self) -> str:
        return format_time_of_day(self.hour, self.minute)

    def to_dict(self) -> dict:
        time12, meridiem = format_alarm_time(self.time)
        return {
            "id": self.id,
            "time": self.time,
            "time_12h": time12,
            "meridiem": meridiem,
            "label": self.label,
            "enabled": self.enabled,
            "sound": sound_name(self.sound_ref),
        }


class AlarmScheduler(TimeTool):
    """
    Recurring wall-clock alarms matched once per tick at minute granularity.

    A ringing alarm stays ringing until dismissed; while it rings no other match
    is made. After a dismissal the (alarm id, minute) pair is remembered so the
    same alarm does not ring again for the rest of that minute. The minute
    includes the date, so the alarm rings again the next day.

    The ringing entry is a frozen copy: editing or deleting the stored alarm does
    not disturb an active ring.
    """

    def __init__(self, clock: WallClock, repository=None):
        super().__init__(clock)
        self.repository = repository
        self._entries: List[AlarmEntry] = repository.load() if repository else []
        self.ringing: Optional[AlarmEntry] = None
        self.last_dismissed: Optional[Tuple[int, datetime]] = None

        self.on_ring = Event()
        self.on_dismiss = Event()
        self.on_change = Event()
        logger.info(f"AlarmScheduler loaded {len(self._entries)} alarm(s).")

    @property
    def entries(self) -> Tuple[AlarmEntry, ...]:
        return tuple(self._entries)

    def get(self, alarm_id: int) -> Optional[AlarmEntry]:
        return next((entry for entry in self._entries if entry.id == alarm_id), None)

    # --- Matching ---

    def tick(self, now: Optional[datetime] = None) -> List[Effect]:
        if self.ringing is not None:
            return []
        bucket = minute_bucket(self._now(now))
        # Scan a snapshot so CRUD calls cannot change the list mid-scan.
        snapshot = tuple(self._entries)
        match = next(
            (entry for entry in snapshot
             if entry.enabled and entry.time_of_day == (bucket.hour, bucket.minute)),
            None,
        )
        if match is None:
            return []
        if self.last_dismissed == (match.id, bucket):
            return []
        self.ringing = match
        self.on_ring.emit(alarm=match)
        logger.info(f"Alarm {match.id} '{match.label}' ringing at {match.time}.")
        return [PlaySound(match.sound_ref, loop=True)]

    def dismiss(self, now: Optional[datetime] = None) -> List[Effect]:
        if self.ringing is None:
            self._reject("dismiss", "nothing is ringing")
            return []
        dismissed = self.ringing
        self.last_dismissed = (dismissed.id, minute_bucket(self._now(now)))
        self.ringing = None
        self.on_dismiss.emit(alarm=dismissed)
        logger.info(f"Alarm {dismissed.id} '{dismissed.label}' dismissed.")
        return [StopSound()]

    # --- Collection ---

    def _fresh_id(self, now: datetime) -> int:
        taken = {entry.id for entry in self._entries}
        if self.ringing is not None:
            taken.add(self.ringing.id)
        if self.last_dismissed is not None:
            taken.add(self.last_dismissed[0])
        candidate = int(now.timestamp() * 1000)
        while candidate in taken:
            candidate += 1
        return candidate

    def add(self, hour, minute, label: str = "Alarm", sound_ref: Optional[str] = None,
            enabled: bool = True, now: Optional[datetime] = None) -> AlarmEntry:
        """Adds an alarm at a 24-hour time of day; out-of-range fields are clamped."""
        entry = AlarmEntry(
            id=self._fresh_id(self._now(now)),
            hour=clamp_hour24_input(hour),
            minute=clamp_minute_input(minute),
            label=(label or "").strip() or "Alarm",
            enabled=enabled,
            sound_ref=sound_ref or DEFAULT_SOUND,
        )
        # New alarms go in front, then a stable sort by time of day.
        self._entries = sorted([entry] + self._entries, key=lambda e: e.time_of_day)
        self._changed()
        logger.info(f"Alarm {entry.id} '{entry.label}' added for {entry.time}.")
        return entry

    def add_12h(self, hour12, minute, meridiem: str, label: str = "Alarm",
                sound_ref: Optional[str] = None, now: Optional[datetime] = None) -> AlarmEntry:
        hour, minute = to_24_hour(hour12, minute, meridiem)
        return self.add(hour, minute, label=label, sound_ref=sound_ref, now=now)

    def toggle_enabled(self, alarm_id: int) -> Optional[AlarmEntry]:
        entry = self.get(alarm_id)
        if entry is None:
            self._reject("toggle", f"unknown alarm {alarm_id}")
            return None
        updated = replace(entry, enabled=not entry.enabled)
        self._entries = [updated if e.id == alarm_id else e for e in self._entries]
        self._changed()
        logger.info(f"Alarm {alarm_id} {'enabled' if updated.enabled else 'disabled'}.")
        return updated

    def delete(self, alarm_id: int) -> bool:
        if self.get(alarm_id) is None:
            self._reject("delete", f"unknown alarm {alarm_id}")
            return False
        self._entries = [e for e in self._entries if e.id != alarm_id]
        self._changed()
        logger.info(f"Alarm {alarm_id} deleted.")
        return True

    def _changed(self):
        if self.repository:
            self.repository.save(self._entries)
        self.on_change.emit(alarms=self.entries)

    def get_status(self, now: Optional[datetime] = None) -> dict:
        return {
            "alarms": [entry.to_dict() for entry in self._entries],
            "ringing": self.ringing.to_dict() if self.ringing else None,
        }

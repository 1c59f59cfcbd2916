"""
Load/save contracts between the time tools and the key/value store.

Stored values are JSON text. Loading never raises: a missing key gives the
defaults, and a corrupt value or a failing store is logged and also gives the
defaults. Saving overwrites the whole value.
"""
import json
from typing import Any, List, Optional

from timekeeper.core.ports.store_port import KeyValueStore
from timekeeper.tools.time_tools.alarm import AlarmEntry
from timekeeper.tools.time_tools.clock import WorldClockCity, WorldClockSettings
from timekeeper.tools.time_tools.sounds import DEFAULT_SOUND
from timekeeper.utils.custom_exception import StoreError
from timekeeper.utils.logging_handler import setup_logger
from timekeeper.utils.time_conversions import format_time_of_day, parse_time_of_day

logger = setup_logger(__name__)

ALARMS_KEY = "alarms"
WORLD_CLOCKS_KEY = "worldClocks"
WORLD_CLOCK_SETTINGS_KEY = "worldClockSettings"
TIMER_SOUND_KEY = "timerSound"
TIME_FORMAT_KEY = "timeFormat"
CLOCK_THEME_KEY = "clockTheme"


class _JsonRepository:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def _read(self, key: str) -> Optional[Any]:
        try:
            raw = self.store.get(key)
        except StoreError as e:
            logger.warning(f"Could not read '{key}' from store, using defaults: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Stored '{key}' is not valid JSON, using defaults: {e}")
            return None

    def _write(self, key: str, value: Any):
        try:
            self.store.set(key, json.dumps(value))
        except StoreError as e:
            logger.error(f"Could not save '{key}': {e}")


class AlarmRepository(_JsonRepository):
    """Alarm collection stored as [{id, time: 'HH:MM', label, enabled, sound}]."""

    def load(self) -> List[AlarmEntry]:
        data = self._read(ALARMS_KEY)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("Stored alarms are not a list, starting empty.")
            return []
        entries = []
        try:
            for item in data:
                hour, minute = parse_time_of_day(item["time"])
                entries.append(AlarmEntry(
                    id=int(item["id"]),
                    hour=hour,
                    minute=minute,
                    label=str(item.get("label") or "Alarm"),
                    enabled=bool(item.get("enabled", True)),
                    sound_ref=item.get("sound") or DEFAULT_SOUND,
                ))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Stored alarms are malformed, starting empty: {e}")
            return []
        return entries

    def save(self, entries) -> None:
        self._write(ALARMS_KEY, [
            {
                "id": entry.id,
                "time": format_time_of_day(entry.hour, entry.minute),
                "label": entry.label,
                "enabled": entry.enabled,
                "sound": entry.sound_ref,
            }
            for entry in entries
        ])


class WorldClockRepository(_JsonRepository):
    """City list and display settings of the world clock board."""

    def load_cities(self, defaults):
        data = self._read(WORLD_CLOCKS_KEY)
        if not isinstance(data, list):
            if data is not None:
                logger.warning("Stored world clocks are not a list, using defaults.")
            return list(defaults)
        try:
            return [
                WorldClockCity(
                    id=str(item["id"]),
                    name=str(item["name"]),
                    timezone=str(item["timezone"]),
                    custom_name=item.get("customName"),
                )
                for item in data
            ]
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Stored world clocks are malformed, using defaults: {e}")
            return list(defaults)

    def save_cities(self, cities) -> None:
        payload = []
        for city in cities:
            item = {"id": city.id, "name": city.name, "timezone": city.timezone}
            if city.custom_name:
                item["customName"] = city.custom_name
            payload.append(item)
        self._write(WORLD_CLOCKS_KEY, payload)

    def load_settings(self):
        data = self._read(WORLD_CLOCK_SETTINGS_KEY)
        defaults = WorldClockSettings()
        if not isinstance(data, dict):
            return defaults
        return WorldClockSettings(
            is_24_hour=bool(data.get("is24Hour", defaults.is_24_hour)),
            show_offset=bool(data.get("showOffset", defaults.show_offset)),
            show_date=bool(data.get("showDate", defaults.show_date)),
        )

    def save_settings(self, settings) -> None:
        self._write(WORLD_CLOCK_SETTINGS_KEY, {
            "is24Hour": settings.is_24_hour,
            "showOffset": settings.show_offset,
            "showDate": settings.show_date,
        })


class PreferencesRepository(_JsonRepository):
    """Single-value preferences: timer sound, clock format and clock theme."""

    def load_timer_sound(self) -> str:
        value = self._read(TIMER_SOUND_KEY)
        return value if isinstance(value, str) and value else DEFAULT_SOUND

    def save_timer_sound(self, sound_ref: str) -> None:
        self._write(TIMER_SOUND_KEY, sound_ref)

    def load_is_24_hour(self) -> bool:
        return self._read(TIME_FORMAT_KEY) == "24h"

    def save_is_24_hour(self, is_24_hour: bool) -> None:
        self._write(TIME_FORMAT_KEY, "24h" if is_24_hour else "12h")

    def load_theme(self, default: str) -> str:
        value = self._read(CLOCK_THEME_KEY)
        return value if isinstance(value, str) and value else default

    def save_theme(self, theme: str) -> None:
        self._write(CLOCK_THEME_KEY, theme)

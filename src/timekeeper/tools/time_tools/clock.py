import datetime
from dataclasses import dataclass, replace
from typing import List, Optional

import pytz

from timekeeper.core.ports.clock_port import WallClock
from timekeeper.tools.time_tools.base_tool import TimeTool
from timekeeper.utils.logging_handler import setup_logger

logger = setup_logger(__name__)

LOCAL_CITY_ID = "local"

THEMES = {
    "rgb": "RGB Glow",
    "pink": "Cyber Pink",
    "blue": "Electric Blue",
    "green": "Lime Green",
    "orange": "Solar Orange",
}
DEFAULT_THEME = "rgb"


class Clock:
    @staticmethod
    def resolve_timezone(timezone_str: Optional[str]):
        """Returns the pytz zone for `timezone_str`, or UTC if it is unknown."""
        if not timezone_str:
            return pytz.utc
        try:
            return pytz.timezone(timezone_str)
        except pytz.exceptions.UnknownTimeZoneError:
            logger.warning(f"Unknown timezone '{timezone_str}'. Using UTC.")
            return pytz.utc

    @staticmethod
    def in_timezone(now: datetime.datetime, timezone_str: Optional[str]) -> datetime.datetime:
        """Converts an aware reading to the given timezone."""
        return now.astimezone(Clock.resolve_timezone(timezone_str))

    @staticmethod
    def format_time(dt: datetime.datetime, is_24_hour: bool, with_seconds: bool = False) -> str:
        if is_24_hour:
            return dt.strftime("%H:%M:%S" if with_seconds else "%H:%M")
        return dt.strftime("%I:%M:%S %p" if with_seconds else "%I:%M %p")

    @staticmethod
    def offset_hours(now: datetime.datetime, timezone_str: str, local_timezone_str: Optional[str] = None) -> float:
        """
        How many hours the zone is ahead of the local zone (negative if behind).
        Without a local zone name the offset of `now` itself is the local one.
        """
        remote = Clock.in_timezone(now, timezone_str).utcoffset()
        if local_timezone_str:
            local = Clock.in_timezone(now, local_timezone_str).utcoffset()
        else:
            local = now.utcoffset()
        return (remote - local).total_seconds() / 3600

    @staticmethod
    def describe_offset(hours: float) -> str:
        if abs(hours) < 0.1:
            return "Local Time"
        magnitude = abs(hours)
        text = f"{magnitude:g}"
        return f"{text}h {'ahead' if hours > 0 else 'behind'}"

    @staticmethod
    def search_timezones(term: str = "") -> List[str]:
        term = (term or "").lower()
        return [tz for tz in pytz.common_timezones if term in tz.lower()]


class DigitalClock(TimeTool):
    """Full-screen local clock with a persisted 12/24-hour choice and colour theme."""

    def __init__(self, clock: WallClock, preferences=None):
        super().__init__(clock)
        self.preferences = preferences
        self.is_24_hour = preferences.load_is_24_hour() if preferences else False
        theme = preferences.load_theme(DEFAULT_THEME) if preferences else DEFAULT_THEME
        self.theme = theme if theme in THEMES else DEFAULT_THEME

    def toggle_format(self) -> bool:
        self.is_24_hour = not self.is_24_hour
        if self.preferences:
            self.preferences.save_is_24_hour(self.is_24_hour)
        return self.is_24_hour

    def set_theme(self, theme: str) -> str:
        if theme not in THEMES:
            self._reject("theme change", f"unknown theme {theme!r}")
            return self.theme
        self.theme = theme
        if self.preferences:
            self.preferences.save_theme(theme)
        return self.theme

    def tick(self, now: Optional[datetime.datetime] = None):
        self.on_tick.emit(**self.get_status(now))
        return []

    def get_status(self, now: Optional[datetime.datetime] = None) -> dict:
        now = self._now(now)
        if self.is_24_hour:
            time_part, seconds, meridiem = now.strftime("%H:%M"), now.strftime(":%S"), ""
        else:
            time_part, seconds, meridiem = now.strftime("%I:%M"), now.strftime(":%S"), now.strftime("%p")
        return {
            "time": time_part,
            "seconds": seconds,
            "meridiem": meridiem,
            "date": now.strftime("%A, %B %d, %Y").replace(" 0", " "),
            "is_24_hour": self.is_24_hour,
            "theme": self.theme,
            "theme_name": THEMES[self.theme],
        }


@dataclass(frozen=True)
class WorldClockCity:
    id: str
    name: str
    timezone: str
    custom_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.custom_name or self.name


@dataclass(frozen=True)
class WorldClockSettings:
    is_24_hour: bool = False
    show_offset: bool = True
    show_date: bool = True


def default_cities(local_timezone: Optional[str] = None) -> List[WorldClockCity]:
    return [
        WorldClockCity(LOCAL_CITY_ID, "Local Time", local_timezone or LOCAL_CITY_ID),
        WorldClockCity("tokyo", "Tokyo", "Asia/Tokyo"),
        WorldClockCity("london", "London", "Europe/London"),
        WorldClockCity("ny", "New York", "America/New_York"),
    ]


def timezone_display_name(timezone_str: str) -> str:
    return timezone_str.split("/")[-1].replace("_", " ") or timezone_str


class WorldClockBoard(TimeTool):
    """
    Ordered list of city clocks. The local entry is always present and cannot be
    removed. Every change is written back through the repository.

    The local entry follows `local_timezone` when one is configured, otherwise
    it shows readings exactly as the wall clock supplies them.
    """

    def __init__(self, clock: WallClock, repository=None, local_timezone: Optional[str] = None):
        super().__init__(clock)
        self.repository = repository
        self.local_timezone = local_timezone
        defaults = default_cities(local_timezone)
        if repository:
            self.cities = repository.load_cities(defaults)
            self.settings = repository.load_settings()
        else:
            self.cities = defaults
            self.settings = WorldClockSettings()

    def _save_cities(self):
        if self.repository:
            self.repository.save_cities(self.cities)

    def _save_settings(self):
        if self.repository:
            self.repository.save_settings(self.settings)

    def add_city(self, timezone_str: str) -> Optional[WorldClockCity]:
        if any(city.timezone == timezone_str for city in self.cities):
            self._reject("add city", f"{timezone_str} already shown")
            return None
        if timezone_str not in pytz.all_timezones_set:
            self._reject("add city", f"unknown timezone {timezone_str!r}")
            return None
        city = WorldClockCity(timezone_str, timezone_display_name(timezone_str), timezone_str)
        self.cities = self.cities + [city]
        self._save_cities()
        return city

    def remove_city(self, city_id: str) -> bool:
        if city_id == LOCAL_CITY_ID:
            self._reject("remove city", "local time cannot be removed")
            return False
        remaining = [city for city in self.cities if city.id != city_id]
        if len(remaining) == len(self.cities):
            return False
        self.cities = remaining
        self._save_cities()
        return True

    def rename_city(self, city_id: str, new_name: str) -> Optional[WorldClockCity]:
        new_name = (new_name or "").strip()
        if not new_name:
            self._reject("rename", "blank name")
            return None
        renamed = None
        cities = []
        for city in self.cities:
            if city.id == city_id:
                city = renamed = replace(city, custom_name=new_name)
            cities.append(city)
        if renamed is None:
            return None
        self.cities = cities
        self._save_cities()
        return renamed

    def move_city(self, from_index: int, to_index: int) -> bool:
        count = len(self.cities)
        if not (0 <= from_index < count and 0 <= to_index < count) or from_index == to_index:
            return False
        if LOCAL_CITY_ID in (self.cities[from_index].id, self.cities[to_index].id):
            self._reject("reorder", "local time stays in place")
            return False
        cities = list(self.cities)
        moved = cities.pop(from_index)
        cities.insert(to_index, moved)
        self.cities = cities
        self._save_cities()
        return True

    def update_settings(self, **changes) -> WorldClockSettings:
        allowed = {k: bool(v) for k, v in changes.items() if k in ("is_24_hour", "show_offset", "show_date")}
        self.settings = replace(self.settings, **allowed)
        self._save_settings()
        return self.settings

    def _city_time(self, city: WorldClockCity, now: datetime.datetime):
        if city.id != LOCAL_CITY_ID:
            return Clock.in_timezone(now, city.timezone), city.timezone
        if self.local_timezone:
            return Clock.in_timezone(now, self.local_timezone), self.local_timezone
        return now, now.tzname() or LOCAL_CITY_ID

    def describe_city(self, city: WorldClockCity, now: datetime.datetime) -> dict:
        local_dt, timezone_str = self._city_time(city, now)
        view = {
            "id": city.id,
            "name": city.display_name,
            "timezone": timezone_str,
            "time": Clock.format_time(local_dt, self.settings.is_24_hour),
        }
        if self.settings.show_date:
            view["weekday"] = local_dt.strftime("%a")
        if self.settings.show_offset:
            hours = 0.0 if city.id == LOCAL_CITY_ID else Clock.offset_hours(now, city.timezone, self.local_timezone)
            view["offset"] = Clock.describe_offset(hours)
        return view

    def tick(self, now: Optional[datetime.datetime] = None):
        self.on_tick.emit(**self.get_status(now))
        return []

    def get_status(self, now: Optional[datetime.datetime] = None) -> dict:
        now = self._now(now)
        return {
            "settings": {
                "is_24_hour": self.settings.is_24_hour,
                "show_offset": self.settings.show_offset,
                "show_date": self.settings.show_date,
            },
            "cities": [self.describe_city(city, now) for city in self.cities],
        }

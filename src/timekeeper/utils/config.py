import os
from dataclasses import dataclass
from typing import Optional

import dotenv

from timekeeper.utils import BASE_DIR, setup_logger

dotenv.load_dotenv()

logger = setup_logger(__name__)


def _int_env(name: str, default: int, minimum: int = 1) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return max(minimum, int(raw))
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}, using {default}.")
        return default


@dataclass
class Settings:
    """Runtime configuration read from the environment (and a .env file)."""

    db_path: str = os.path.join(BASE_DIR, "data", "timekeeper.db")
    local_timezone: Optional[str] = None
    stopwatch_tick_ms: int = 10
    timer_tick_ms: int = 200
    alarm_tick_ms: int = 1000
    clock_tick_ms: int = 1000
    gemini_model: str = "gemini-flash-lite-latest"
    google_api_key: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            db_path=os.environ.get("TIMEKEEPER_DB_PATH") or defaults.db_path,
            local_timezone=os.environ.get("TIMEKEEPER_LOCAL_TIMEZONE") or defaults.local_timezone,
            stopwatch_tick_ms=_int_env("TIMEKEEPER_STOPWATCH_TICK_MS", defaults.stopwatch_tick_ms),
            timer_tick_ms=_int_env("TIMEKEEPER_TIMER_TICK_MS", defaults.timer_tick_ms),
            alarm_tick_ms=_int_env("TIMEKEEPER_ALARM_TICK_MS", defaults.alarm_tick_ms),
            clock_tick_ms=_int_env("TIMEKEEPER_CLOCK_TICK_MS", defaults.clock_tick_ms),
            gemini_model=os.environ.get("TIMEKEEPER_GEMINI_MODEL") or defaults.gemini_model,
            google_api_key=os.environ.get("GOOGLE_API_KEY"),
        )

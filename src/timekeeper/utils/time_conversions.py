import re
from datetime import datetime, timedelta

_ONE_MS = timedelta(milliseconds=1)
_TIME_OF_DAY = re.compile(r"^(\d{1,2}):(\d{2})$")

DEFAULT_HOUR12 = 7
DEFAULT_MINUTE = 30


def convert_to_seconds(hours=0, minutes=0, seconds=0):
    """
    Converts hours, minutes, and seconds into a total duration in seconds.

    Args:
        hours (int/float): Number of hours. Defaults to 0.
        minutes (int/float): Number of minutes. Defaults to 0.
        seconds (int/float): Number of seconds. Defaults to 0.

    Returns:
        int/float: The total duration in seconds.

    Raises:
        ValueError: If any input is negative.
    """
    if any(val < 0 for val in [hours, minutes, seconds]):
        raise ValueError("Time components cannot be negative.")
    return (hours * 3600) + (minutes * 60) + seconds


# --- Wall clock arithmetic ---

def elapsed_ms(later: datetime, earlier: datetime) -> int:
    """Whole milliseconds from `earlier` to `later` (negative if `later` is before)."""
    return (later - earlier) // _ONE_MS


def shift_ms(reading: datetime, ms: int) -> datetime:
    return reading + timedelta(milliseconds=ms)


def minute_bucket(reading: datetime) -> datetime:
    """Truncates a reading to its minute: the date, hour and minute survive."""
    return reading.replace(second=0, microsecond=0)


# --- Display formatting ---

def format_seconds_to_hms(total_seconds):
    """
    Converts a total number of seconds into a human-readable HH:MM:SS string.
    Negative values are shown as zero.
    """
    total_seconds = max(0, int(total_seconds))

    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02}:{minutes:02}:{seconds:02}"


def format_ms_to_hms(ms: int) -> str:
    """Countdown display: partial seconds round up so 00:00:00 only shows at zero."""
    ms = max(0, ms)
    return format_seconds_to_hms((ms + 999) // 1000)


def split_stopwatch_time(ms: int) -> tuple[int, int, int]:
    """(minutes, seconds, hundredths); hundredths are truncated, never rounded."""
    ms = max(0, ms)
    minutes = ms // 60000
    seconds = (ms % 60000) // 1000
    hundredths = (ms % 1000) // 10
    return minutes, seconds, hundredths


def format_stopwatch_time(ms: int) -> str:
    minutes, seconds, hundredths = split_stopwatch_time(ms)
    return f"{minutes:02}:{seconds:02}.{hundredths:02}"


# --- Timer keypad ---

def parse_timer_digits(digits: str) -> int:
    """
    Parses keypad digits into seconds.

    Up to two digits are seconds, up to four are MMSS and anything longer is
    HHMMSS. Non-digit characters are ignored, so "5:00" reads as "500".
    """
    clean = re.sub(r"[^0-9]", "", digits or "")
    if not clean:
        return 0
    padded = clean.zfill(6)
    return convert_to_seconds(
        hours=int(padded[:-4]),
        minutes=int(padded[-4:-2]),
        seconds=int(padded[-2:]),
    )


# --- Alarm time of day ---

def to_24_hour(hour12: int, minute: int, meridiem: str) -> tuple[int, int]:
    """
    Converts a 12-hour clock reading to (hour, minute) on the 24-hour clock.

    12 AM is midnight (0), 12 PM is noon (12), 1-11 PM add twelve hours and
    1-11 AM are unchanged. Out-of-range fields are clamped first.
    """
    hour12 = clamp_hour12_input(hour12)
    minute = clamp_minute_input(minute)
    is_pm = str(meridiem).strip().upper() == "PM"
    if hour12 == 12:
        return (12 if is_pm else 0), minute
    return (hour12 + 12 if is_pm else hour12), minute


def format_alarm_time(time24: str) -> tuple[str, str]:
    """'13:15' -> ('01:15', 'PM')."""
    hour, minute = parse_time_of_day(time24)
    meridiem = "PM" if hour >= 12 else "AM"
    hour12 = hour % 12 or 12
    return f"{hour12:02}:{minute:02}", meridiem


def parse_time_of_day(value: str) -> tuple[int, int]:
    """Strict 'HH:MM' parser for stored alarms; raises ValueError on anything else."""
    match = _TIME_OF_DAY.match(str(value).strip())
    if not match:
        raise ValueError(f"Invalid time of day: {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Time of day out of range: {value!r}")
    return hour, minute


def format_time_of_day(hour: int, minute: int) -> str:
    return f"{hour:02}:{minute:02}"


def _to_int(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    digits = re.sub(r"[^0-9-]", "", str(value))[:3]
    try:
        return int(digits)
    except ValueError:
        return None


def clamp_hour12_input(value) -> int:
    """Hour field of the 12-hour entry: anything below 1 or above 12 becomes 12."""
    num = _to_int(value)
    if num is None:
        return DEFAULT_HOUR12
    if num < 1 or num > 12:
        return 12
    return num


def clamp_hour24_input(value) -> int:
    num = _to_int(value)
    if num is None:
        return DEFAULT_HOUR12
    return min(23, max(0, num))


def clamp_minute_input(value) -> int:
    num = _to_int(value)
    if num is None:
        return DEFAULT_MINUTE
    return min(59, max(0, num))


def step_hour12(current: int, amount: int) -> int:
    # Wraps 12 -> 1 going up and 1 -> 12 going down.
    value = clamp_hour12_input(current) + amount
    return (value - 1) % 12 + 1


def step_minute(current: int, amount: int) -> int:
    return (clamp_minute_input(current) + amount) % 60

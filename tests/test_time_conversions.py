"""Tests for clock arithmetic, display formatting and alarm time entry helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from timekeeper.utils.time_conversions import (
    clamp_hour12_input,
    clamp_hour24_input,
    clamp_minute_input,
    convert_to_seconds,
    elapsed_ms,
    format_alarm_time,
    format_ms_to_hms,
    format_seconds_to_hms,
    format_stopwatch_time,
    minute_bucket,
    parse_time_of_day,
    parse_timer_digits,
    step_hour12,
    step_minute,
    to_24_hour,
)


class TestTwelveHourConversion:

    @pytest.mark.parametrize("hour12, minute, meridiem, expected", [
        (12, 0, "AM", (0, 0)),
        (12, 0, "PM", (12, 0)),
        (1, 15, "PM", (13, 15)),
        (11, 59, "PM", (23, 59)),
        (7, 30, "AM", (7, 30)),
    ])
    def test_known_readings(self, hour12, minute, meridiem, expected):
        assert to_24_hour(hour12, minute, meridiem) == expected

    def test_every_hour_maps_to_a_distinct_24_hour_value(self):
        hours = {to_24_hour(h, 0, m)[0] for h in range(1, 13) for m in ("AM", "PM")}
        assert hours == set(range(24))

    def test_round_trip_through_display_format(self):
        for hour in range(24):
            time12, meridiem = format_alarm_time(f"{hour:02}:07")
            assert to_24_hour(int(time12[:2]), 7, meridiem) == (hour, 7)

    def test_out_of_range_input_is_clamped_first(self):
        assert to_24_hour(13, 75, "PM") == (12, 59)


class TestFieldClamps:

    def test_hour12(self):
        assert clamp_hour12_input(0) == 12
        assert clamp_hour12_input(13) == 12
        assert clamp_hour12_input("5") == 5
        assert clamp_hour12_input("abc") == 7

    def test_hour24(self):
        assert clamp_hour24_input(-1) == 0
        assert clamp_hour24_input(24) == 23
        assert clamp_hour24_input("") == 7

    def test_minute(self):
        assert clamp_minute_input(75) == 59
        assert clamp_minute_input(-5) == 0
        assert clamp_minute_input("x") == 30

    def test_steppers_wrap(self):
        assert step_hour12(12, 1) == 1
        assert step_hour12(1, -1) == 12
        assert step_minute(59, 1) == 0
        assert step_minute(0, -1) == 59


class TestTimerDigits:

    @pytest.mark.parametrize("digits, seconds", [
        ("45", 45),
        ("130", 90),
        ("500", 300),
        ("10000", 3600),
        ("123456", 12 * 3600 + 34 * 60 + 56),
        ("5:00", 300),
        ("99", 99),
        ("9999", 99 * 60 + 99),
        ("", 0),
    ])
    def test_parse(self, digits, seconds):
        assert parse_timer_digits(digits) == seconds


class TestFormatting:

    def test_countdown_rounds_partial_seconds_up(self):
        assert format_ms_to_hms(1) == "00:00:01"
        assert format_ms_to_hms(1000) == "00:00:01"
        assert format_ms_to_hms(1001) == "00:00:02"
        assert format_ms_to_hms(0) == "00:00:00"
        assert format_ms_to_hms(-50) == "00:00:00"
        assert format_ms_to_hms(3600000) == "01:00:00"

    def test_seconds_to_hms(self):
        assert format_seconds_to_hms(3725) == "01:02:05"
        assert format_seconds_to_hms(-3) == "00:00:00"

    def test_stopwatch_format(self):
        assert format_stopwatch_time(0) == "00:00.00"
        assert format_stopwatch_time(61234) == "01:01.23"
        assert format_stopwatch_time(999) == "00:00.99"

    def test_alarm_display(self):
        assert format_alarm_time("13:15") == ("01:15", "PM")
        assert format_alarm_time("00:05") == ("12:05", "AM")
        assert format_alarm_time("12:00") == ("12:00", "PM")

    def test_convert_to_seconds(self):
        assert convert_to_seconds(hours=1, minutes=2, seconds=3) == 3723
        with pytest.raises(ValueError):
            convert_to_seconds(minutes=-1)


class TestTimeOfDay:

    def test_parse_valid(self):
        assert parse_time_of_day("07:30") == (7, 30)
        assert parse_time_of_day("7:05") == (7, 5)

    @pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "7.30", ""])
    def test_parse_invalid(self, value):
        with pytest.raises(ValueError):
            parse_time_of_day(value)


class TestWallClockArithmetic:

    def test_elapsed_ms(self):
        earlier = datetime(2026, 10, 17, 7, 0, tzinfo=timezone.utc)
        assert elapsed_ms(earlier + timedelta(milliseconds=1234), earlier) == 1234
        assert elapsed_ms(earlier, earlier + timedelta(seconds=1)) == -1000

    def test_minute_bucket_keeps_the_date(self):
        reading = datetime(2026, 10, 17, 7, 30, 42, 500000, tzinfo=timezone.utc)
        bucket = minute_bucket(reading)
        assert bucket == datetime(2026, 10, 17, 7, 30, tzinfo=timezone.utc)
        assert minute_bucket(reading + timedelta(days=1)) != bucket

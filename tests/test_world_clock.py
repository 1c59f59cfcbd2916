"""Tests for the world clock board and the digital clock."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from timekeeper.adapters.clock_adapters.system_clock import ManualWallClock
from timekeeper.tools.time_tools.clock import (
    LOCAL_CITY_ID,
    Clock,
    DigitalClock,
    WorldClockBoard,
)


@pytest.fixture
def board(clock, world_clock_repository):
    return WorldClockBoard(clock, repository=world_clock_repository, local_timezone="UTC")


def city_ids(board):
    return [city.id for city in board.cities]


class TestOffsets:

    @pytest.mark.parametrize("hours, text", [
        (0, "Local Time"),
        (0.05, "Local Time"),
        (9, "9h ahead"),
        (5.5, "5.5h ahead"),
        (-4, "4h behind"),
    ])
    def test_describe_offset(self, hours, text):
        assert Clock.describe_offset(hours) == text

    def test_unknown_timezone_falls_back_to_utc(self, clock):
        assert Clock.in_timezone(clock.now(), "Mars/Olympus_Mons").utcoffset().total_seconds() == 0

    def test_search_timezones(self):
        assert "Asia/Kolkata" in Clock.search_timezones("kolk")
        assert Clock.search_timezones("no-such-zone") == []


class TestBoard:

    def test_default_cities(self, board):
        assert city_ids(board) == [LOCAL_CITY_ID, "tokyo", "london", "ny"]

    def test_city_view(self, board):
        views = {view["id"]: view for view in board.get_status()["cities"]}
        assert views["local"] == {
            "id": "local", "name": "Local Time", "timezone": "UTC",
            "time": "07:29 AM", "weekday": "Sat", "offset": "Local Time",
        }
        assert views["tokyo"]["time"] == "04:29 PM"
        assert views["tokyo"]["offset"] == "9h ahead"
        assert views["london"]["offset"] == "1h ahead"
        assert views["ny"]["time"] == "03:29 AM"
        assert views["ny"]["offset"] == "4h behind"

    def test_local_time_cannot_be_removed(self, board):
        assert board.remove_city(LOCAL_CITY_ID) is False
        assert LOCAL_CITY_ID in city_ids(board)

    def test_remove_city(self, board, store):
        assert board.remove_city("tokyo") is True
        assert "tokyo" not in city_ids(board)
        assert [c["id"] for c in json.loads(store.get("worldClocks"))] == ["local", "london", "ny"]

    def test_add_city(self, board):
        city = board.add_city("Asia/Kolkata")
        assert city.name == "Kolkata"
        assert city_ids(board)[-1] == "Asia/Kolkata"

    def test_add_duplicate_or_unknown_timezone_is_rejected(self, board):
        assert board.add_city("Asia/Tokyo") is None
        assert board.add_city("Mars/Olympus_Mons") is None
        assert len(board.cities) == 4

    def test_rename_city(self, board, store):
        renamed = board.rename_city("london", "  Office ")
        assert renamed.display_name == "Office"
        assert json.loads(store.get("worldClocks"))[2]["customName"] == "Office"
        assert board.rename_city("london", "   ") is None

    def test_move_city(self, board):
        assert board.move_city(1, 3) is True
        assert city_ids(board) == [LOCAL_CITY_ID, "london", "ny", "tokyo"]

    def test_local_time_stays_in_place(self, board):
        assert board.move_city(0, 2) is False
        assert board.move_city(2, 0) is False
        assert board.move_city(1, 9) is False

    def test_settings_shape_the_view(self, board):
        board.update_settings(is_24_hour=True, show_offset=False, show_date=False)
        view = board.get_status()["cities"][1]
        assert view == {"id": "tokyo", "name": "Tokyo", "timezone": "Asia/Tokyo", "time": "16:29"}

    def test_changes_survive_a_restart(self, board, clock, world_clock_repository):
        board.add_city("Europe/Paris")
        board.update_settings(is_24_hour=True)

        reloaded = WorldClockBoard(clock, repository=world_clock_repository, local_timezone="UTC")
        assert city_ids(reloaded)[-1] == "Europe/Paris"
        assert reloaded.settings.is_24_hour is True
        assert reloaded.settings.show_offset is True


class TestDigitalClock:

    def test_twelve_hour_status(self, clock, preferences):
        status = DigitalClock(clock, preferences=preferences).get_status()
        assert status == {
            "time": "07:29",
            "seconds": ":00",
            "meridiem": "AM",
            "date": "Saturday, October 17, 2026",
            "is_24_hour": False,
            "theme": "rgb",
            "theme_name": "RGB Glow",
        }

    def test_format_and_theme_are_remembered(self, clock, preferences, store):
        digital = DigitalClock(clock, preferences=preferences)
        assert digital.toggle_format() is True
        assert digital.set_theme("pink") == "pink"
        assert json.loads(store.get("timeFormat")) == "24h"

        reloaded = DigitalClock(clock, preferences=preferences)
        assert reloaded.is_24_hour is True
        assert reloaded.theme == "pink"
        assert reloaded.get_status()["meridiem"] == ""

    def test_unknown_theme_is_rejected(self, clock):
        digital = DigitalClock(clock)
        assert digital.set_theme("plaid") == "rgb"

    def test_single_digit_day_has_no_leading_zero(self, clock):
        clock.advance(days=-10)
        assert DigitalClock(clock).get_status()["date"] == "Wednesday, October 7, 2026"


class TestLocalZoneFromTheClock:

    @pytest.fixture
    def berlin_clock(self):
        return ManualWallClock(datetime(2026, 10, 17, 9, 15, tzinfo=timezone(timedelta(hours=2))))

    def test_local_entry_matches_the_clock_reading(self, berlin_clock):
        board = WorldClockBoard(berlin_clock)
        local = board.get_status()["cities"][0]
        assert local["id"] == LOCAL_CITY_ID
        assert local["time"] == "09:15 AM"
        assert local["offset"] == "Local Time"

    def test_offsets_are_relative_to_the_clock_zone(self, berlin_clock):
        views = {view["id"]: view for view in WorldClockBoard(berlin_clock).get_status()["cities"]}
        assert views["tokyo"]["offset"] == "7h ahead"
        assert views["london"]["offset"] == "1h behind"
        assert views["ny"]["offset"] == "6h behind"

    def test_configured_zone_overrides_the_clock_zone(self, berlin_clock):
        board = WorldClockBoard(berlin_clock, local_timezone="Asia/Tokyo")
        views = {view["id"]: view for view in board.get_status()["cities"]}
        assert views["local"]["time"] == "04:15 PM"
        assert views["tokyo"]["offset"] == "Local Time"

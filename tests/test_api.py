"""Tests for the HTTP surface, run against a manual clock and silent audio."""

import pytest
from fastapi.testclient import TestClient

from timekeeper.adapters.audio_adapters.silent_adapter import SilentAudioPlayer
from timekeeper.core.surface import TimeSurface
from timekeeper.main.fastapi_main import Args, create_app


@pytest.fixture
def api_surface(clock, store):
    return TimeSurface(clock, store, SilentAudioPlayer)


@pytest.fixture
def client(api_surface):
    with TestClient(create_app(Args(no_audio=True), surface=api_surface)) as test_client:
        yield test_client


class TestStopwatchRoutes:

    def test_start_lap_stop(self, client, clock):
        assert client.post("/stopwatch/start").json()["is_running"] is True
        clock.advance(ms=1500)
        status = client.post("/stopwatch/lap").json()
        assert status["laps"][0]["duration_formatted"] == "00:01.50"
        status = client.post("/stopwatch/stop").json()
        assert status["is_running"] is False
        assert status["elapsed_ms"] == 1500

    def test_unknown_action(self, client):
        assert client.post("/stopwatch/explode").status_code == 404


class TestTimerRoutes:

    def test_keypad_and_countdown(self, client, clock, api_surface):
        client.post("/timer/preset", json={"value": "0"})
        for key in "130":
            status = client.post("/timer/key", json={"key": key}).json()
        assert status["configured_duration_ms"] == 90000

        assert client.post("/timer/toggle").json()["phase"] == "running"
        clock.advance(seconds=90)
        api_surface.tick_timer()
        assert client.get("/timer").json()["is_ringing"] is True
        assert client.post("/timer/dismiss").json()["phase"] == "setup"

    def test_presets_and_sound(self, client):
        assert [p["value"] for p in client.get("/timer/presets").json()] == ["100", "500", "1000", "3000"]
        assert client.post("/timer/sound", json={"sound": "Zen Bells"}).json()["sound"] == "Zen Bells"


class TestAlarmRoutes:

    def test_add_toggle_delete(self, client):
        alarm = client.post("/alarms/12h", json={"hour": 6, "minute": 45, "meridiem": "PM", "label": ""}).json()
        assert (alarm["time"], alarm["label"]) == ("18:45", "Alarm")

        toggled = client.post(f"/alarms/{alarm['id']}/toggle").json()
        assert toggled["enabled"] is False

        assert client.delete(f"/alarms/{alarm['id']}").json()["alarms"] == []
        assert client.delete(f"/alarms/{alarm['id']}").status_code == 404

    def test_ring_and_dismiss(self, client, clock, api_surface):
        client.post("/alarms", json={"hour": 7, "minute": 30, "sound": "Uplift"})
        clock.advance(minutes=1)
        api_surface.tick_alarms()
        ringing = client.get("/alarms").json()["ringing"]
        assert ringing["sound"] == "Uplift"
        assert client.post("/alarms/dismiss").json()["ringing"] is None

    def test_entry_steppers(self, client):
        def step(**body):
            return client.post("/alarms/12h/step", json=body).json()

        assert step(hour=12, minute=30, field="hour", amount=1) == {"hour": 1, "minute": 30}
        assert step(hour=1, minute=30, field="hour", amount=-1) == {"hour": 12, "minute": 30}
        assert step(hour=7, minute=59, field="minute", amount=1) == {"hour": 7, "minute": 0}
        assert step(hour=0, minute=75, field="minute", amount=-1) == {"hour": 12, "minute": 58}
        assert client.post("/alarms/12h/step", json={"field": "second"}).status_code == 400

    def test_sound_names(self, client):
        assert client.get("/alarms/sounds").json() == ["Sunrise", "Uplift", "Digital Pulse", "Zen Bells"]


class TestClockRoutes:

    def test_world_clock_edits(self, client):
        assert client.post("/world-clock/cities", json={"timezone": "Europe/Paris"}).status_code == 200
        assert client.post("/world-clock/cities", json={"timezone": "Europe/Paris"}).status_code == 400
        assert client.delete("/world-clock/cities/local").status_code == 400

        status = client.post("/world-clock/rename/Europe/Paris", json={"name": "Office"}).json()
        assert status["cities"][-1]["name"] == "Office"

        status = client.delete("/world-clock/cities/Europe/Paris").json()
        assert [city["id"] for city in status["cities"]] == ["local", "tokyo", "london", "ny"]

    def test_world_clock_settings_and_search(self, client):
        status = client.post("/world-clock/settings", json={"show_offset": False}).json()
        assert status["settings"] == {"is_24_hour": False, "show_offset": False, "show_date": True}
        assert "Asia/Kolkata" in client.get("/world-clock/timezones", params={"q": "kolk"}).json()

    def test_digital_clock(self, client):
        assert client.get("/clock").json()["time"] == "07:29"
        assert client.post("/clock/format").json()["time"] == "07:29"
        assert client.post("/clock/theme", json={"theme": "orange"}).json()["theme_name"] == "Solar Orange"
        assert client.post("/clock/theme", json={"theme": "plaid"}).status_code == 400


def test_assistant_without_key(client):
    reply = client.post("/assistant", json={"prompt": "What time is it?"}).json()["reply"]
    assert reply == "Sorry, the assistant is not configured."

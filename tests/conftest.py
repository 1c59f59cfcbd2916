"""
Shared pytest fixtures for the time tool tests.

Every test runs against a manual wall clock that only moves when told to, an
in-memory store and recording audio players.
"""

import os
import tempfile
from datetime import datetime, timezone

# Keep test logs out of the package directory.
os.environ.setdefault("TIMEKEEPER_LOG_DIR", tempfile.mkdtemp(prefix="timekeeper-logs-"))

import pytest  # noqa: E402

from timekeeper.adapters.clock_adapters.system_clock import ManualWallClock  # noqa: E402
from timekeeper.adapters.memory_adapters.in_memory_kv_adapter import InMemoryKeyValueStore  # noqa: E402
from timekeeper.core.repositories import (  # noqa: E402
    AlarmRepository,
    PreferencesRepository,
    WorldClockRepository,
)
from timekeeper.core.surface import TimeSurface  # noqa: E402
from tests.test_doubles import RecordingAudioPlayer  # noqa: E402

# Saturday, 17 October 2026, one minute before a 07:30 alarm.
START = datetime(2026, 10, 17, 7, 29, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return ManualWallClock(START)


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def alarm_repository(store):
    return AlarmRepository(store)


@pytest.fixture
def world_clock_repository(store):
    return WorldClockRepository(store)


@pytest.fixture
def preferences(store):
    return PreferencesRepository(store)


@pytest.fixture
def audio_players():
    """Every player handed out by `audio_factory`, in creation order."""
    return []


@pytest.fixture
def audio_factory(audio_players):
    def factory():
        player = RecordingAudioPlayer()
        audio_players.append(player)
        return player
    return factory


@pytest.fixture
def surface(clock, store, audio_factory):
    return TimeSurface(clock, store, audio_factory)

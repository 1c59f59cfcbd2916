from timekeeper.core.ports.clock_port import WallClock
from timekeeper.core.ports.audio_port import AudioPlayer
from timekeeper.core.ports.store_port import KeyValueStore
from timekeeper.core.ports.assistant_port import Assistant

__all__ = ["WallClock", "AudioPlayer", "KeyValueStore", "Assistant"]

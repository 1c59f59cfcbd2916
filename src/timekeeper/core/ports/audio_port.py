from abc import ABC, abstractmethod


class AudioPlayer(ABC):
    """Side-effect sink for alarm and timer sounds. The sound reference is opaque."""

    @abstractmethod
    def play(self, sound_ref: str, loop: bool = False) -> None:
        """Start playing `sound_ref`; raise PlaybackError if it cannot be played."""
        pass

    @abstractmethod
    def stop(self) -> None:
        pass

from typing import Optional

from timekeeper.core.ports.audio_port import AudioPlayer
from timekeeper.utils.logging_handler import setup_logger

logger = setup_logger(__name__)


class SilentAudioPlayer(AudioPlayer):
    """Logs playback requests instead of producing sound (headless runs, --no-audio)."""

    def __init__(self):
        self.current: Optional[str] = None
        self.looping = False

    def play(self, sound_ref: str, loop: bool = False) -> None:
        self.current = sound_ref
        self.looping = loop
        logger.info(f"(silent) play {sound_ref[:40]}... loop={loop}")

    def stop(self) -> None:
        if self.current is not None:
            logger.info("(silent) stop")
        self.current = None
        self.looping = False

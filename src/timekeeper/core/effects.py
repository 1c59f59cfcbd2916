from dataclasses import dataclass
from typing import Iterable, Optional, Union

from timekeeper.core.ports.audio_port import AudioPlayer
from timekeeper.utils.custom_exception import PlaybackError
from timekeeper.utils.logging_handler import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class PlaySound:
    sound_ref: str
    loop: bool = True


@dataclass(frozen=True)
class StopSound:
    pass


Effect = Union[PlaySound, StopSound]


class EffectDispatcher:
    """
    Carries out the effects returned by an engine against one audio channel.

    Starting the sound that is already playing is a no-op. Playback failures are
    logged and swallowed: the engine has already moved to its ringing state and
    that state does not depend on whether audio came out.
    """

    def __init__(self, audio_player: AudioPlayer, channel: str = "default"):
        self.audio_player = audio_player
        self.channel = channel
        self._playing: Optional[str] = None

    @property
    def playing(self) -> Optional[str]:
        return self._playing

    def dispatch(self, effects: Iterable[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, PlaySound):
                self._play(effect)
            elif isinstance(effect, StopSound):
                self._stop()
            else:
                logger.warning(f"[{self.channel}] Unknown effect ignored: {effect!r}")

    def _play(self, effect: PlaySound):
        if self._playing == effect.sound_ref:
            logger.debug(f"[{self.channel}] Sound already playing, skipping start.")
            return
        try:
            self.audio_player.play(effect.sound_ref, loop=effect.loop)
            self._playing = effect.sound_ref
        except PlaybackError as e:
            logger.error(f"[{self.channel}] Audio playback failed: {e}")
        except Exception:
            logger.exception(f"[{self.channel}] Unexpected audio adapter failure")

    def _stop(self):
        self._playing = None
        try:
            self.audio_player.stop()
        except Exception:
            logger.exception(f"[{self.channel}] Failed to stop audio")

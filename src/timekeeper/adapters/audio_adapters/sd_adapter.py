import threading

import sounddevice as sd

from timekeeper.adapters.audio_adapters.wav_decoder import load_wav
from timekeeper.core.ports.audio_port import AudioPlayer
from timekeeper.utils.custom_exception import PlaybackError
from timekeeper.utils.logging_handler import setup_logger

logger = setup_logger(__name__)


class SoundDevicePlayer(AudioPlayer):
    """
    Plays WAV sounds through sounddevice. Each instance owns its own output
    stream, so the timer and the alarm scheduler can ring independently.
    """

    def __init__(self):
        self.output_stream = None
        self._data = None
        self._position = 0
        self._loop = False
        self._lock = threading.Lock()

    def play(self, sound_ref: str, loop: bool = False) -> None:
        data, rate = load_wav(sound_ref)
        self.stop()
        with self._lock:
            self._data = data
            self._position = 0
            self._loop = loop
        try:
            self.output_stream = sd.OutputStream(
                samplerate=rate,
                channels=data.shape[1],
                dtype=data.dtype,
                callback=self._callback,
                finished_callback=self._finished,
            )
            self.output_stream.start()
        except Exception as e:
            self.output_stream = None
            raise PlaybackError(f"Audio output failed: {e}") from e

    def _callback(self, outdata, frames, time_info, status):
        if status:
            logger.warning(f"Audio output status: {status}")
        with self._lock:
            data = self._data
            written = 0
            while data is not None and written < frames:
                chunk = data[self._position:self._position + frames - written]
                outdata[written:written + len(chunk)] = chunk
                written += len(chunk)
                self._position += len(chunk)
                if self._position >= len(data):
                    if not self._loop:
                        break
                    self._position = 0
            outdata[written:] = 0
            if data is None or (written < frames and not self._loop):
                raise sd.CallbackStop()

    def _finished(self):
        logger.debug("Audio stream finished.")

    def stop(self) -> None:
        stream = self.output_stream
        self.output_stream = None
        with self._lock:
            self._data = None
        if stream is not None:
            try:
                stream.stop()
                stream.close()
            except Exception as e:
                logger.error("Audio stop error", exc_info=e)

import base64
import io
import wave

import numpy as np

from timekeeper.utils.custom_exception import PlaybackError

_DTYPES = {1: np.uint8, 2: np.int16, 4: np.int32}


def load_wav(sound_ref: str):
    """
    Decodes a WAV sound reference into (frames, samplerate).
    Accepts a `data:audio/wav;base64,...` URI or a file path.
    Returns a numpy array shaped (frames, channels).
    """
    try:
        if sound_ref.startswith("data:"):
            _, _, payload = sound_ref.partition(",")
            source = io.BytesIO(base64.b64decode(payload))
        else:
            source = sound_ref
        with wave.open(source, "rb") as wav:
            channels = wav.getnchannels()
            width = wav.getsampwidth()
            rate = wav.getframerate()
            raw = wav.readframes(wav.getnframes())
    except (OSError, EOFError, ValueError, wave.Error) as e:
        raise PlaybackError(f"Cannot decode sound: {e}") from e

    if width not in _DTYPES:
        raise PlaybackError(f"Unsupported sample width: {width} bytes")
    usable = len(raw) - len(raw) % (width * channels)
    frames = np.frombuffer(raw[:usable], dtype=_DTYPES[width])
    if frames.size == 0:
        raise PlaybackError("Sound has no audio frames")
    return frames.reshape(-1, channels), rate

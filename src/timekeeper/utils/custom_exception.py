class PlaybackError(Exception):
    """Raised by an audio adapter when a sound cannot be decoded or played."""
    pass


class StoreError(Exception):
    """Raised by a key/value store adapter when a read or write fails."""
    pass

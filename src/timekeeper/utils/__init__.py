import os

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

from timekeeper.utils.logging_handler import setup_logger  # noqa: E402
from timekeeper.utils.event import Event  # noqa: E402

__all__ = ["BASE_DIR", "setup_logger", "Event"]

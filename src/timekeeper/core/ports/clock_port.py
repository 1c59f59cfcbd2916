from abc import ABC, abstractmethod
from datetime import datetime


class WallClock(ABC):
    """Source of wall-clock readings. The core never keeps time on its own."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime in the local zone."""
        pass

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """Persisted settings: text values under string keys, overwritten on every save."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

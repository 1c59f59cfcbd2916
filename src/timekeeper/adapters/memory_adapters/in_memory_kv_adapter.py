from typing import Dict, Optional

from timekeeper.core.ports.store_port import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store; nothing survives a restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

import os
import sqlite3
import threading
from typing import Optional

from timekeeper.core.ports.store_port import KeyValueStore
from timekeeper.utils.custom_exception import StoreError
from timekeeper.utils.logging_handler import setup_logger

logger = setup_logger(__name__)


class SqliteKeyValueStore(KeyValueStore):
    """Settings store backed by a single SQLite table of text values."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        if db_path != ":memory:":
            os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
        self._lock = threading.Lock()
        try:
            self.conn = sqlite3.connect(db_path, check_same_thread=False)
            self._initialize_tables()
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open settings database {db_path}: {e}") from e

    def _initialize_tables(self):
        """Private method to ensure schema exists."""
        with self._lock:
            self.conn.execute("""
            CREATE TABLE IF NOT EXISTS kv(
                Key TEXT PRIMARY KEY,
                Value TEXT NOT NULL,
                UpdatedOn TEXT
            );""")
            self.conn.commit()

    def get(self, key: str) -> Optional[str]:
        try:
            with self._lock:
                row = self.conn.execute("SELECT Value FROM kv WHERE Key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            logger.exception(f"Database error in get: {e}")
            raise StoreError(str(e)) from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            with self._lock:
                self.conn.execute("""
                    INSERT INTO kv (Key, Value, UpdatedOn) VALUES (?, ?, DATETIME('now'))
                    ON CONFLICT(Key) DO UPDATE SET Value = excluded.Value, UpdatedOn = excluded.UpdatedOn
                """, (key, value))
                self.conn.commit()
        except sqlite3.Error as e:
            logger.exception(f"Database error in set: {e}")
            raise StoreError(str(e)) from e

    def close(self):
        with self._lock:
            self.conn.close()

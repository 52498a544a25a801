"""
Key-value stores used to persist UI bookkeeping such as the embedding
history and the running embedding counter.

Stores expose save(key, value) / load(key, default) / delete(key); values
must be JSON serialisable.
"""
import json
import threading
from typing import Any, Dict

from utils.logger import get_logger
from .connection import db_connection, transaction

logger = get_logger(__name__)


class MemoryKeyValueStore:
    """In-process store, used by tests and when no database is configured."""

    def __init__(self):
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()

    def save(self, key: str, value: Any):
        with self._lock:
            self._data[key] = json.dumps(value)

    def load(self, key: str, default: Any = None) -> Any:
        with self._lock:
            raw = self._data.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def delete(self, key: str):
        with self._lock:
            self._data.pop(key, None)


class SqliteKeyValueStore:
    """
    Key-value store backed by a single SQLite table.
    """

    def __init__(self, database_path: str, timeout: float = 5.0):
        self.database_path = database_path
        self.timeout = timeout
        self._lock = threading.Lock()
        self._init_db()

    def _init_db(self):
        with transaction(self.database_path, timeout=self.timeout) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT,
                    updated_at TEXT DEFAULT (datetime('now'))
                )
                """
            )

    def save(self, key: str, value: Any):
        """Insert or replace the JSON encoded value stored under key."""
        payload = json.dumps(value)
        with self._lock, transaction(self.database_path, timeout=self.timeout) as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, datetime('now'))
                ON CONFLICT(key) DO UPDATE SET
                    value=excluded.value,
                    updated_at=datetime('now')
                """,
                (key, payload),
            )

    def load(self, key: str, default: Any = None) -> Any:
        """
        Return the value stored under key, or default when it is missing
        or cannot be decoded.
        """
        with db_connection(self.database_path, timeout=self.timeout) as conn:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        if row is None or row["value"] is None:
            return default
        try:
            return json.loads(row["value"])
        except ValueError as e:
            logger.warning(f"Ignoring unreadable value for key '{key}': {e}")
            return default

    def delete(self, key: str):
        with self._lock, transaction(self.database_path, timeout=self.timeout) as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

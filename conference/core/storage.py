"""
Storage collaborator - get/set/delete of serialized collections by key.
SqliteStorage is the durable store; MemoryStorage backs tests and previews.
"""

import sqlite3
from typing import Dict, Optional, Protocol

from .db import get_db, init_db
from .errors import PersistenceError
from ..util.logging import logger


class Storage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class SqliteStorage:
    """Key-value storage in the sqlite `kv` table."""

    def __init__(self, db_path: str = None):
        self.db_path = db_path
        init_db(db_path)

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT value FROM kv WHERE key = ?", (key,))
                row = cursor.fetchone()
                return row[0] if row else None
        except sqlite3.Error as e:
            logger.error(f"Database error during get for key '{key}': {e}")
            raise PersistenceError(f"Failed to read '{key}': {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "INSERT INTO kv (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
                    (key, value)
                )
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Database error during set for key '{key}': {e}")
            raise PersistenceError(f"Failed to write '{key}': {e}") from e

    def delete(self, key: str) -> None:
        try:
            with get_db(self.db_path) as conn:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Database error during delete for key '{key}': {e}")
            raise PersistenceError(f"Failed to delete '{key}': {e}") from e


class MemoryStorage:
    """Dict-backed storage."""

    def __init__(self, initial: Dict[str, str] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

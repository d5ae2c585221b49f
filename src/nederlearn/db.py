"""Key-value persistence backed by SQLite."""
import logging
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path

from nederlearn.config import settings
from nederlearn.errors import PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = settings.DB_PATH

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value BLOB NOT NULL,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating the key-value table if it doesn't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


class Persistence(ABC):
    """Key-value store the core reads and writes all state through."""

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        pass

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass

    def remove_many(self, keys: list[str]) -> None:
        for key in keys:
            self.remove(key)

    @abstractmethod
    def keys_with_prefix(self, prefix: str) -> list[str]:
        pass


class SQLitePersistence(Persistence):
    """Persistence over the kv_store table. Every call opens its own connection."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path

    def _run(self, action: str, sql: str, params=()) -> list:
        try:
            conn = get_connection(self.db_path)
            try:
                rows = conn.execute(sql, params).fetchall()
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error(f"Persistence {action} failed: {e}")
            raise PersistenceError(f"{action} failed: {e}") from e
        return rows

    def get(self, key: str) -> bytes | None:
        rows = self._run("get", "SELECT value FROM kv_store WHERE key = ?", (key,))
        return bytes(rows[0]["value"]) if rows else None

    def set(self, key: str, value: bytes) -> None:
        self._run(
            "set",
            """INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at""",
            (key, sqlite3.Binary(value)),
        )

    def remove(self, key: str) -> None:
        self._run("remove", "DELETE FROM kv_store WHERE key = ?", (key,))

    def remove_many(self, keys: list[str]) -> None:
        if not keys:
            return
        placeholders = ", ".join("?" for _ in keys)
        self._run("remove_many", f"DELETE FROM kv_store WHERE key IN ({placeholders})", tuple(keys))

    def keys_with_prefix(self, prefix: str) -> list[str]:
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        rows = self._run(
            "keys",
            "SELECT key FROM kv_store WHERE key LIKE ? ESCAPE '\\' ORDER BY key",
            (escaped + "%",),
        )
        return [row["key"] for row in rows]

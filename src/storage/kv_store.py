# src/storage/kv_store.py

"""SQLite-backed key-value store for durable session collections."""

import logging
import sqlite3
from pathlib import Path
from typing import Protocol

from src.config.settings import Settings

logger = logging.getLogger("storefront.storage")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS kv (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""


class KeyValueStore(Protocol):
    """Minimal get/set-by-key contract the persistence adapter relies on."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class SqliteKeyValueStore:
    """String values keyed by name, one row per key, last writer wins."""

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.STORE_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self.path = path
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        logger.debug("Key-value store opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def get(self, key: str) -> str | None:
        """Return the stored value, or ``None`` when the key is absent."""
        row = self._conn.execute(
            "SELECT value FROM kv WHERE key = ?", (key,),
        ).fetchone()
        if row is None:
            return None
        value: str = row[0]
        return value

    def set(self, key: str, value: str) -> None:
        """Insert or replace *key* and commit immediately."""
        self._conn.execute(
            "INSERT INTO kv (key, value, updated_at) "
            "VALUES (?, ?, datetime('now')) "
            "ON CONFLICT(key) DO UPDATE SET "
            "value=excluded.value, updated_at=excluded.updated_at",
            (key, value),
        )
        self._conn.commit()
        logger.debug("Wrote %d bytes to key '%s'", len(value), key)

"""
Key-value persistence for plugin-updater.

The host exposes a generic option store; the update checker keeps three
kinds of state in it (release cache entry, last-check timestamp, optional
token).  Two backends are provided:

  MemoryStore  — process-local dict, used by tests and embedded hosts
  SqliteStore  — single ``options`` table, JSON-encoded values

Thread safety:
  Each SqliteStore statement runs under a lock, and the connection is opened
  with check_same_thread=False so the host may share one store across
  request threads.  Sequences of calls (read the gate, fetch, write the gate)
  are NOT atomic; callers accept that race.
"""

from __future__ import annotations

import json
import sqlite3
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import structlog

from plugin_updater.core.exceptions import StoreError

logger = structlog.get_logger()


class KeyValueStore(ABC):
    """Abstract host option store: JSON-compatible values by string key."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for *key*, or *default* if absent."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove *key*.  Removing a missing key is not an error."""


class MemoryStore(KeyValueStore):
    """In-memory store.  Values are round-tripped through JSON like SqliteStore."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            raw = self._data.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        encoded = json.dumps(value)
        with self._lock:
            self._data[key] = encoded

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class SqliteStore(KeyValueStore):
    """SQLite-backed option store."""

    def __init__(self, db_path: Path) -> None:
        self._path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def connect(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = sqlite3.connect(str(self._path), check_same_thread=False)
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS options (
                    key         TEXT PRIMARY KEY,
                    value       TEXT NOT NULL,
                    updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
                )
            """)
            self._conn.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot open option store at {self._path}: {exc}") from exc
        logger.debug("option_store_connected", path=str(self._path))

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> SqliteStore:
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def _db(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError("Option store is not connected. Call connect() first.")
        return self._conn

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            try:
                row = self._db.execute("SELECT value FROM options WHERE key = ?", (key,)).fetchone()
            except sqlite3.Error as exc:
                raise StoreError(f"Cannot read option {key!r}: {exc}") from exc
        if row is None:
            return default
        try:
            return json.loads(row[0])
        except ValueError:
            logger.warning("option_value_corrupt", key=key)
            return default

    def set(self, key: str, value: Any) -> None:
        encoded = json.dumps(value)
        with self._lock:
            try:
                self._db.execute(
                    """
                    INSERT INTO options (key, value, updated_at)
                    VALUES (?, ?, datetime('now'))
                    ON CONFLICT(key) DO UPDATE
                       SET value = excluded.value, updated_at = excluded.updated_at
                    """,
                    (key, encoded),
                )
                self._db.commit()
            except sqlite3.Error as exc:
                raise StoreError(f"Cannot write option {key!r}: {exc}") from exc

    def delete(self, key: str) -> None:
        with self._lock:
            try:
                self._db.execute("DELETE FROM options WHERE key = ?", (key,))
                self._db.commit()
            except sqlite3.Error as exc:
                raise StoreError(f"Cannot delete option {key!r}: {exc}") from exc

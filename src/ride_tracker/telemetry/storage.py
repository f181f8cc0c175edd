"""Key-value persistence for live ride state, fuel settings and archived sessions.

Schema design notes:
  - One ``kv`` table of JSON blobs keyed by name, mirroring the browser
    ``localStorage`` layout the web client already uses, so a snapshot can be
    moved between the two without translation.
  - ``INTEGER PRIMARY KEY`` rowid alias plus a ``UNIQUE`` key column; writes
    use ``INSERT … ON CONFLICT DO UPDATE`` so a flush is a single statement.
  - ``updated_at`` is informational only; nothing reads it back.

:class:`PersistentState` wraps one key: it loads at construction and flushes
on every ``set()``.  Store failures are logged and never raised, so the
in-memory value always stays authoritative.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Generic, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")

# Keys shared with the browser client.
KEY_POSITIONS = "gps_temp_positions"
KEY_STARTED_AT = "gps_temp_started_at"
KEY_TANK_CAPACITY = "fuel_tank_capacity"
KEY_AVG_MILEAGE = "fuel_avg_mileage"
KEY_CURRENT_FUEL = "fuel_current"
KEY_SAVED_SESSIONS = "gps_saved_sessions"

_DDL = """
PRAGMA journal_mode = WAL;
PRAGMA synchronous  = NORMAL;

CREATE TABLE IF NOT EXISTS kv (
    idx        INTEGER PRIMARY KEY,
    key        TEXT    NOT NULL UNIQUE,
    value_json TEXT    NOT NULL,
    updated_at TEXT    NOT NULL
               DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
);
"""

_UPSERT = """
INSERT INTO kv (key, value_json) VALUES (?, ?)
ON CONFLICT (key) DO UPDATE SET
    value_json = excluded.value_json,
    updated_at = strftime('%Y-%m-%dT%H:%M:%SZ', 'now')
"""

_SELECT = "SELECT value_json FROM kv WHERE key = ?"

# Errors a store may raise that PersistentState degrades on.
STORE_ERRORS = (sqlite3.Error, OSError, TypeError, ValueError)


class RideStorage:
    """Stores JSON-serializable values in a SQLite key-value table.

    Parameters
    ----------
    db_path:
        Path to the SQLite file.  Pass ``":memory:"`` for in-process testing.
    """

    def __init__(self, db_path: str = "ride.db") -> None:
        # check_same_thread=False: the web service serializes access with a lock
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        for stmt in _DDL.strip().split(";"):
            stmt = stmt.strip()
            if stmt:
                self._conn.execute(stmt)
        self._conn.commit()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load(self, key: str) -> object | None:
        """Return the value stored under *key*, or None if absent."""
        row = self._conn.execute(_SELECT, (key,)).fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    def save(self, key: str, value: object) -> None:
        """Store *value* under *key*, replacing any previous value."""
        payload = json.dumps(value, allow_nan=False)
        self._conn.execute(_UPSERT, (key, payload))
        self._conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()


class InMemoryStore:
    """Dict-backed store with the same ``load``/``save`` interface.

    Values are round-tripped through JSON so tests observe exactly what a
    real store would hand back.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def load(self, key: str) -> object | None:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def save(self, key: str, value: object) -> None:
        self._data[key] = json.dumps(value, allow_nan=False)

    def close(self) -> None:
        """No-op close."""


class PersistentState(Generic[T]):
    """An in-memory value mirrored to one *key* of a store.

    The value is loaded once at construction (falling back to *default* when
    the key is absent or unreadable) and written back on every :meth:`set`.
    """

    def __init__(self, store, key: str, default: T) -> None:
        self._store = store
        self._key = key
        self._value: T = default
        try:
            loaded = store.load(key)
        except STORE_ERRORS as exc:
            _logger.warning("Error reading stored key %r: %s", key, exc)
        else:
            if loaded is not None:
                self._value = loaded  # type: ignore[assignment]

    @property
    def key(self) -> str:
        return self._key

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> bool:
        """Replace the value and flush it.

        Returns False if the write failed (the new value is kept in memory).
        """
        self._value = value
        return self.flush()

    def flush(self) -> bool:
        try:
            self._store.save(self._key, self._value)
        except STORE_ERRORS as exc:
            _logger.warning("Error writing stored key %r: %s", self._key, exc)
            return False
        return True

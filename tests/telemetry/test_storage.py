"""Tests for RideStorage, InMemoryStore and PersistentState."""

from __future__ import annotations

import logging
import sqlite3
from unittest.mock import MagicMock

import pytest

from ride_tracker.telemetry.storage import (
    KEY_POSITIONS,
    InMemoryStore,
    PersistentState,
    RideStorage,
)


@pytest.fixture
def storage():
    s = RideStorage(":memory:")
    yield s
    s.close()


# ---------------------------------------------------------------------------
# RideStorage
# ---------------------------------------------------------------------------


def test_load_missing_key_returns_none(storage):
    assert storage.load("nope") is None


def test_save_then_load(storage):
    storage.save(KEY_POSITIONS, [{"lat": 1.0, "lon": 2.0}])
    assert storage.load(KEY_POSITIONS) == [{"lat": 1.0, "lon": 2.0}]


def test_save_overwrites_previous_value(storage):
    storage.save("fuel_current", 8.0)
    storage.save("fuel_current", 6.5)
    assert storage.load("fuel_current") == 6.5


def test_values_survive_reopen(tmp_path):
    path = str(tmp_path / "ride.db")
    first = RideStorage(path)
    first.save("gps_temp_started_at", 1_700_000_000_000)
    first.close()

    second = RideStorage(path)
    try:
        assert second.load("gps_temp_started_at") == 1_700_000_000_000
    finally:
        second.close()


def test_nan_is_rejected(storage):
    with pytest.raises(ValueError):
        storage.save("fuel_current", float("nan"))


# ---------------------------------------------------------------------------
# InMemoryStore
# ---------------------------------------------------------------------------


def test_in_memory_store_returns_copies():
    store = InMemoryStore()
    value = [1, 2]
    store.save("k", value)
    value.append(3)
    assert store.load("k") == [1, 2]


# ---------------------------------------------------------------------------
# PersistentState
# ---------------------------------------------------------------------------


def test_state_uses_default_when_absent():
    state = PersistentState(InMemoryStore(), "fuel_tank_capacity", 8.0)
    assert state.get() == 8.0


def test_state_loads_existing_value():
    store = InMemoryStore()
    store.save("fuel_tank_capacity", 10.0)
    assert PersistentState(store, "fuel_tank_capacity", 8.0).get() == 10.0


def test_set_writes_through():
    store = InMemoryStore()
    state = PersistentState(store, "fuel_current", 8.0)
    assert state.set(5.0) is True
    assert store.load("fuel_current") == 5.0


def test_unreadable_store_falls_back_to_default(caplog):
    store = MagicMock()
    store.load.side_effect = sqlite3.DatabaseError("file is not a database")

    with caplog.at_level(logging.WARNING):
        state = PersistentState(store, "gps_saved_sessions", [])

    assert state.get() == []
    assert "gps_saved_sessions" in caplog.text


def test_failed_write_keeps_value_in_memory(caplog):
    store = MagicMock()
    store.load.return_value = None
    store.save.side_effect = sqlite3.OperationalError("database or disk is full")
    state = PersistentState(store, "gps_temp_positions", [])

    with caplog.at_level(logging.WARNING):
        ok = state.set([{"lat": 0.0}])

    assert ok is False
    assert state.get() == [{"lat": 0.0}]
    assert "database or disk is full" in caplog.text


def test_flush_retries_after_failure():
    store = MagicMock()
    store.load.return_value = None
    store.save.side_effect = [OSError("quota exceeded"), None]
    state = PersistentState(store, "fuel_current", 8.0)

    assert state.set(7.0) is False
    assert state.flush() is True
    store.save.assert_called_with("fuel_current", 7.0)

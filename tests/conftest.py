"""Shared fixtures: controllable clocks and an in-memory ride controller."""

from __future__ import annotations

import pytest

from ride_tracker.hotpath.notify import NullNotifier
from ride_tracker.hotpath.stop_detector import StopDetector
from ride_tracker.session.controller import RideController
from ride_tracker.telemetry.storage import InMemoryStore

T0_MS = 1_700_000_000_000


class FakeWallClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, ms: int = T0_MS) -> None:
        self.ms = ms

    def __call__(self) -> int:
        return self.ms

    def advance(self, seconds: float) -> None:
        self.ms += int(seconds * 1000)


class FakeMonotonic:
    """Monotonic seconds clock for the stop detector."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def wall_clock() -> FakeWallClock:
    return FakeWallClock()


@pytest.fixture
def mono_clock() -> FakeMonotonic:
    return FakeMonotonic()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def notifier() -> NullNotifier:
    return NullNotifier()


@pytest.fixture
def controller(store, notifier, wall_clock, mono_clock) -> RideController:
    return RideController(
        store,
        notifier=notifier,
        detector=StopDetector(clock=mono_clock),
        clock=wall_clock,
    )

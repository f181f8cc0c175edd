"""RideController — owns the live session, fuel state and stop detector.

All mutations go through this class, one event at a time.  It is not
thread-safe on its own; callers with real parallelism (the web service)
serialize access with a lock.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import TypeVar

from ride_tracker.analysis.aggregator import aggregate
from ride_tracker.errors import (
    CapabilityUnavailableError,
    ConfirmationRequiredError,
    EmptySessionError,
    LocationPermissionError,
    RecordingActiveError,
)
from ride_tracker.fuel.model import (
    DEFAULT_AVG_MILEAGE_KM_PER_L,
    DEFAULT_TANK_CAPACITY_L,
    FuelModel,
)
from ride_tracker.hotpath.notify import NotificationConfig, NullNotifier
from ride_tracker.hotpath.stop_detector import StopDetector
from ride_tracker.telemetry import storage as keys
from ride_tracker.telemetry.models import ArchivedSession, PositionSample
from ride_tracker.telemetry.source import PermissionState
from ride_tracker.telemetry.storage import PersistentState

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def _now_ms() -> int:
    return int(time.time() * 1000)


def _restore(state: PersistentState[list], from_dict: Callable[[dict], T]) -> list[T]:
    """Rebuild stored records; an unreadable list is logged and dropped."""
    try:
        return [from_dict(d) for d in state.get()]
    except (KeyError, TypeError, ValueError) as exc:
        _logger.warning("Discarding unreadable stored key %r: %s", state.key, exc)
        return []


@dataclass
class RideSnapshot:
    """Everything the display layer shows, computed at one instant."""

    recording: bool
    sample_count: int
    started_at: int | None
    distance_km: float
    last_speed_kmh: float
    avg_speed_kmh: float
    area_m2: float
    fuel_l: float
    tank_capacity_l: float
    avg_mileage_km_per_l: float
    range_km: float
    fuel_pct: float
    last_error: str | None = None
    last_stop_notified_at: int | None = None


class RideController:
    """Start/stop/save/clear of a recording plus fuel commands.

    Parameters
    ----------
    store:
        Key-value store with ``load(key)`` / ``save(key, value)``.
    notifier:
        Object with ``permission`` and ``notify(title, body)``.  Defaults to a
        :class:`~ride_tracker.hotpath.notify.NullNotifier`.
    detector:
        Stop detector; defaults to a 1 km/h / 15 s :class:`StopDetector`.
    clock:
        Wall clock in epoch milliseconds; injected by tests.
    """

    def __init__(
        self,
        store,
        notifier=None,
        detector: StopDetector | None = None,
        clock: Callable[[], int] | None = None,
        notification_config: NotificationConfig | None = None,
    ) -> None:
        self._clock = clock or _now_ms
        self._notifier = notifier if notifier is not None else NullNotifier()
        self._detector = detector or StopDetector()
        self._notification_cfg = notification_config or NotificationConfig()

        self._positions_state: PersistentState[list] = PersistentState(
            store, keys.KEY_POSITIONS, []
        )
        self._started_at_state: PersistentState[int | None] = PersistentState(
            store, keys.KEY_STARTED_AT, None
        )
        self._capacity_state = PersistentState(
            store, keys.KEY_TANK_CAPACITY, DEFAULT_TANK_CAPACITY_L
        )
        self._mileage_state = PersistentState(
            store, keys.KEY_AVG_MILEAGE, DEFAULT_AVG_MILEAGE_KM_PER_L
        )
        self._current_fuel_state = PersistentState(
            store, keys.KEY_CURRENT_FUEL, DEFAULT_TANK_CAPACITY_L
        )
        self._sessions_state: PersistentState[list] = PersistentState(
            store, keys.KEY_SAVED_SESSIONS, []
        )

        self._positions: list[PositionSample] = _restore(
            self._positions_state, PositionSample.from_dict
        )
        self._sessions: list[ArchivedSession] = _restore(
            self._sessions_state, ArchivedSession.from_dict
        )
        self._fuel = FuelModel.from_stored(
            self._capacity_state.get(),
            self._mileage_state.get(),
            self._current_fuel_state.get(),
        )

        self._recording = False
        self._last_speed_kmh = 0.0
        self._last_error: str | None = None
        self._last_stop_notified_at: int | None = None
        self._subscribers: list[Callable[[RideSnapshot], None]] = []

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def recording(self) -> bool:
        return self._recording

    @property
    def positions(self) -> tuple[PositionSample, ...]:
        return tuple(self._positions)

    @property
    def started_at(self) -> int | None:
        return self._started_at_state.get()

    @property
    def sessions(self) -> tuple[ArchivedSession, ...]:
        return tuple(self._sessions)

    @property
    def fuel(self) -> FuelModel:
        return self._fuel

    @property
    def detector(self) -> StopDetector:
        return self._detector

    def snapshot(self) -> RideSnapshot:
        """Derived stats at the current wall-clock time."""
        stats = aggregate(self._positions, self.started_at, self._clock())
        fuel = self._fuel
        return RideSnapshot(
            recording=self._recording,
            sample_count=len(self._positions),
            started_at=self.started_at,
            distance_km=stats.distance_km,
            last_speed_kmh=self._last_speed_kmh,
            avg_speed_kmh=stats.avg_speed_kmh,
            area_m2=stats.area_m2,
            fuel_l=fuel.current_fuel_l,
            tank_capacity_l=fuel.tank_capacity_l,
            avg_mileage_km_per_l=fuel.avg_mileage_km_per_l,
            range_km=fuel.estimated_range_km,
            fuel_pct=fuel.fuel_percentage,
            last_error=self._last_error,
            last_stop_notified_at=self._last_stop_notified_at,
        )

    # ------------------------------------------------------------------
    # Stats-changed subscribers
    # ------------------------------------------------------------------

    def subscribe(self, callback: Callable[[RideSnapshot], None]) -> None:
        """Register *callback* to receive a snapshot after every mutation."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[RideSnapshot], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    # ------------------------------------------------------------------
    # Recording commands
    # ------------------------------------------------------------------

    def start(self, access, confirmed: bool = False) -> None:
        """Begin recording.

        Parameters
        ----------
        access:
            Object with ``available() -> bool`` and
            ``permission() -> PermissionState``.
        confirmed:
            Must be True to discard an unsaved session left from a previous
            recording.

        Raises
        ------
        CapabilityUnavailableError
            The platform has no location capability.
        LocationPermissionError
            Location permission is denied.
        ConfirmationRequiredError
            An unsaved session exists and *confirmed* is False.
        """
        if self._recording:
            return
        if not access.available():
            raise CapabilityUnavailableError("Geolocation is not available on this device.")
        try:
            permission = access.permission()
        except Exception as exc:
            _logger.warning("Could not query geolocation permission: %s", exc)
        else:
            if permission is PermissionState.DENIED:
                raise LocationPermissionError(
                    "Geolocation permission is denied. Please enable it in settings."
                )

        if self._positions:
            if not confirmed:
                raise ConfirmationRequiredError(
                    "You have a temporary session. Starting a new recording will clear it."
                )
            self._reset_live_session()

        self._recording = True
        self._last_error = None
        if not self.started_at:
            self._started_at_state.set(self._clock())
        _logger.info("Recording started (started_at=%s)", self.started_at)
        self._publish()

    def stop(self) -> None:
        """Halt sample intake and cancel any pending stop notification."""
        self._detector.cancel()
        self._last_speed_kmh = 0.0
        if not self._recording:
            return
        self._recording = False
        _logger.info("Recording stopped with %d positions", len(self._positions))
        self._publish()

    def fail(self, message: str) -> None:
        """Handle a fix-stream error: keep *message* and stop recording."""
        _logger.warning("Geolocation error: %s", message)
        self._last_error = message
        self.stop()

    def record_fix(self, sample: PositionSample) -> bool:
        """Append *sample* to the live session.

        Returns False (and changes nothing) when not recording.
        """
        if not self._recording:
            _logger.debug("Ignoring fix while not recording")
            return False

        # An elapsed stop window fires before this sample can disarm it.
        self.poll()
        self._last_speed_kmh = sample.speed_kmh
        self._detector.observe(self._last_speed_kmh)

        self._positions.append(sample)
        self._positions_state.set([p.to_dict() for p in self._positions])

        if len(self._positions) >= 2:
            self._fuel.consume_between(self._positions[-2], self._positions[-1])
            self._current_fuel_state.set(self._fuel.current_fuel_l)

        self._publish()
        return True

    def poll(self) -> bool:
        """Fire the stop notification if its window has elapsed.

        Returns True when a notification was delivered.
        """
        if not self._detector.poll():
            return False
        self._last_stop_notified_at = self._clock()
        if self._notifier.permission is not PermissionState.GRANTED:
            _logger.info("Stop detected; notifications not granted")
            self._publish()
            return False
        cfg = self._notification_cfg
        self._notifier.notify(cfg.stop_title, cfg.stop_body)
        self._publish()
        return True

    def save(self) -> ArchivedSession:
        """Archive the live session and clear it.

        Raises
        ------
        RecordingActiveError
            Recording is still running.
        EmptySessionError
            No positions have been recorded.
        """
        if self._recording:
            raise RecordingActiveError("Stop recording before saving the session.")
        if not self._positions:
            raise EmptySessionError("No positions to save.")

        now = self._clock()
        stats = aggregate(self._positions, self.started_at, now)
        session = ArchivedSession(
            id=now,
            name=f"Session {datetime.fromtimestamp(now / 1000):%Y-%m-%d %H:%M:%S}",
            created_at=now,
            positions=tuple(self._positions),
            stats=stats.to_session_stats(),
        )
        self._sessions.append(session)
        if not self._sessions_state.set([s.to_dict() for s in self._sessions]):
            _logger.warning("Session %d kept in memory only", session.id)
        else:
            _logger.info("Saved %s (%d positions)", session.name, len(session.positions))

        self._reset_live_session()
        self._publish()
        return session

    def clear(self, confirmed: bool = False) -> None:
        """Discard the live session.  Cannot be undone.

        Raises
        ------
        RecordingActiveError
            Recording is still running.
        ConfirmationRequiredError
            *confirmed* is False.
        """
        if self._recording:
            raise RecordingActiveError("Stop recording before clearing points.")
        if not confirmed:
            raise ConfirmationRequiredError(
                "Clear all currently recorded points? This cannot be undone."
            )
        self._reset_live_session()
        self._publish()

    # ------------------------------------------------------------------
    # Fuel commands
    # ------------------------------------------------------------------

    def refuel(self, liters) -> float:
        """Add fuel; raises :class:`~ride_tracker.errors.InvalidRefuelError` on bad input."""
        level = self._fuel.refuel(liters)
        self._current_fuel_state.set(level)
        self._publish()
        return level

    def set_tank_capacity(self, value) -> None:
        self._fuel.set_tank_capacity(value)
        self._capacity_state.set(self._fuel.tank_capacity_l)
        self._publish()

    def set_avg_mileage(self, value) -> None:
        self._fuel.set_avg_mileage(value)
        self._mileage_state.set(self._fuel.avg_mileage_km_per_l)
        self._publish()

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def request_notifications(self, permission) -> PermissionState:
        """Record the notification permission reported by the platform."""
        state = PermissionState.parse(permission)
        self._notifier.permission = state
        return state

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _reset_live_session(self) -> None:
        self._positions = []
        self._positions_state.set([])
        self._started_at_state.set(None)

    def _publish(self) -> None:
        if not self._subscribers:
            return
        snap = self.snapshot()
        for cb in list(self._subscribers):
            cb(snap)

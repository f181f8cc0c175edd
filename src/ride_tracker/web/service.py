"""RideService — serializes web requests onto a single RideController."""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict

from ride_tracker.overlay.mirror import MiniDashboard
from ride_tracker.session.controller import RideController
from ride_tracker.telemetry.models import ArchivedSession, PositionSample
from ride_tracker.telemetry.parser import FixParser
from ride_tracker.telemetry.source import DeclaredAccess, PermissionState

_logger = logging.getLogger(__name__)


class RideService:
    """Thread-safe facade over a :class:`RideController`.

    FastAPI runs sync endpoints on a thread pool, so every controller call is
    made under one lock.  While recording, a ticker thread polls the stop
    detector under the same lock.

    Parameters
    ----------
    controller:
        The controller that owns all ride state.
    parser:
        Raw fix parser; a default :class:`FixParser` is created if None.
    poll_interval_s:
        How often the ticker polls the stop detector.
    """

    def __init__(
        self,
        controller: RideController,
        parser: FixParser | None = None,
        poll_interval_s: float = 0.5,
    ) -> None:
        self._controller = controller
        self._parser = parser or FixParser()
        self._poll_interval = poll_interval_s
        self._lock = threading.RLock()
        self._ticker_stop = threading.Event()
        self._ticker: threading.Thread | None = None
        self._mirror = MiniDashboard(controller)
        self._mirror.open()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def stats(self) -> dict:
        with self._lock:
            return asdict(self._controller.snapshot())

    def positions(self) -> list[PositionSample]:
        with self._lock:
            return list(self._controller.positions)

    def sessions(self) -> list[ArchivedSession]:
        with self._lock:
            return list(self._controller.sessions)

    def dashboard(self) -> dict:
        with self._lock:
            return dict(self._mirror.refresh() or {})

    def fuel(self) -> dict:
        with self._lock:
            fuel = self._controller.fuel
            return {
                "fuel_l": fuel.current_fuel_l,
                "tank_capacity_l": fuel.tank_capacity_l,
                "avg_mileage_km_per_l": fuel.avg_mileage_km_per_l,
                "range_km": fuel.estimated_range_km,
            }

    @property
    def recording(self) -> bool:
        with self._lock:
            return self._controller.recording

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(
        self,
        geolocation_available: bool,
        permission: str | None,
        confirmed: bool = False,
    ) -> None:
        """Start recording; controller errors propagate unchanged."""
        access = DeclaredAccess(
            geolocation_available=geolocation_available,
            permission_state=None if permission is None else PermissionState.parse(permission),
        )
        with self._lock:
            self._controller.start(access, confirmed=confirmed)
        self._start_ticker()

    def stop(self) -> None:
        with self._lock:
            self._controller.stop()
        self._stop_ticker()

    def record_fix(self, raw: dict) -> bool:
        """Parse and append one pushed fix; returns False when not recording."""
        sample = self._parser.parse(raw)
        with self._lock:
            return self._controller.record_fix(sample)

    def fail(self, message: str) -> None:
        with self._lock:
            self._controller.fail(message)
        self._stop_ticker()

    def save(self) -> ArchivedSession:
        with self._lock:
            return self._controller.save()

    def clear(self, confirmed: bool) -> None:
        with self._lock:
            self._controller.clear(confirmed=confirmed)

    def refuel(self, liters) -> float:
        with self._lock:
            return self._controller.refuel(liters)

    def update_fuel_settings(
        self,
        tank_capacity_l: float | None = None,
        avg_mileage_km_per_l: float | None = None,
    ) -> None:
        with self._lock:
            if tank_capacity_l is not None:
                self._controller.set_tank_capacity(tank_capacity_l)
            if avg_mileage_km_per_l is not None:
                self._controller.set_avg_mileage(avg_mileage_km_per_l)

    def set_notification_permission(self, permission: str) -> PermissionState:
        with self._lock:
            return self._controller.request_notifications(permission)

    def poll(self) -> bool:
        """Poll the stop detector once; returns True if a notification fired."""
        with self._lock:
            return self._controller.poll()

    def close(self) -> None:
        """Stop the ticker and detach the dashboard mirror."""
        self._stop_ticker()
        with self._lock:
            self._mirror.close()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _start_ticker(self) -> None:
        if self._ticker is not None and self._ticker.is_alive():
            return
        self._ticker_stop.clear()
        self._ticker = threading.Thread(target=self._tick_loop, daemon=True, name="StopTicker")
        self._ticker.start()

    def _stop_ticker(self) -> None:
        self._ticker_stop.set()
        if self._ticker is not None:
            if self._ticker is not threading.current_thread():
                self._ticker.join(timeout=2.0)
            self._ticker = None

    def _tick_loop(self) -> None:
        while not self._ticker_stop.wait(self._poll_interval):
            with self._lock:
                if not self._controller.recording:
                    return
                if self._controller.poll():
                    _logger.info("Stop notification sent")

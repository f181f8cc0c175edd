"""Dashboard rendering — data formatting for the ride stats display."""

from __future__ import annotations

import math

from ride_tracker.session.controller import RideSnapshot

# Average-speed band (km/h) considered fuel-efficient for a commuter bike.
_EFFICIENT_MIN_KMH = 40.0
_EFFICIENT_MAX_KMH = 55.0


class DashboardRenderer:
    """Formats :class:`RideSnapshot` values for display.

    All methods are pure data transformations with no side effects and can be
    called from any thread.
    """

    def format_number(self, value: float | None, digits: int = 2) -> str:
        """Format *value* with *digits* decimals; None/NaN/Inf render as zero.

        Examples
        --------
        >>> DashboardRenderer().format_number(3.14159, 1)
        '3.1'
        >>> DashboardRenderer().format_number(None)
        '0.00'
        """
        if value is None or not math.isfinite(value):
            value = 0.0
        return f"{value:.{digits}f}"

    def efficiency_indicator(self, avg_speed_kmh: float) -> str:
        """Return ``'gray'`` when idle, ``'green'`` inside the efficient band, else ``'yellow'``."""
        if avg_speed_kmh == 0:
            return "gray"
        if _EFFICIENT_MIN_KMH <= avg_speed_kmh <= _EFFICIENT_MAX_KMH:
            return "green"
        return "yellow"

    def render(self, snap: RideSnapshot) -> dict:
        """Return a display-ready dict from a :class:`RideSnapshot`.

        Returns
        -------
        dict with keys:
            ``speed``       – current speed, km/h, 1 dp
            ``distance``    – total distance, km, 2 dp
            ``avg_speed``   – average speed, km/h, 1 dp
            ``range``       – estimated range, km, 0 dp
            ``fuel``        – current fuel, litres, 2 dp
            ``tank``        – tank capacity, litres, 1 dp
            ``fuel_pct``    – fuel percentage, float [0, 100]
            ``efficiency``  – ``'gray'`` / ``'green'`` / ``'yellow'``
            ``recording``   – bool
        """
        return {
            "speed": self.format_number(snap.last_speed_kmh, 1),
            "distance": self.format_number(snap.distance_km, 2),
            "avg_speed": self.format_number(snap.avg_speed_kmh, 1),
            "range": self.format_number(snap.range_km, 0),
            "fuel": self.format_number(snap.fuel_l, 2),
            "tank": self.format_number(snap.tank_capacity_l, 1),
            "fuel_pct": min(100.0, max(0.0, snap.fuel_pct)),
            "efficiency": self.efficiency_indicator(snap.avg_speed_kmh),
            "recording": snap.recording,
        }

"""Fuel model — distance-driven depletion, refuels and range estimate."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ride_tracker.errors import InvalidRefuelError, InvalidSettingError
from ride_tracker.geo.geodesy import distance_meters
from ride_tracker.telemetry.models import PositionSample

_logger = logging.getLogger(__name__)

# Honda Dream Yug with a rebuilt engine; adjust per vehicle.
DEFAULT_TANK_CAPACITY_L = 8.0
DEFAULT_AVG_MILEAGE_KM_PER_L = 42.0


def _as_number(value) -> float | None:
    """Return *value* as a finite float, or None if it is not one."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


@dataclass
class FuelState:
    """Tank settings and current level.

    ``current_fuel_l`` stays within ``[0, tank_capacity_l]`` under depletion
    and refuel.  Editing capacity or mileage never touches it.
    """

    tank_capacity_l: float = DEFAULT_TANK_CAPACITY_L
    avg_mileage_km_per_l: float = DEFAULT_AVG_MILEAGE_KM_PER_L
    current_fuel_l: float = DEFAULT_TANK_CAPACITY_L


class FuelModel:
    """Applies ride events to a :class:`FuelState`.

    Parameters
    ----------
    state:
        Initial state; defaults to a full 8 L tank at 42 km/L.
    """

    def __init__(self, state: FuelState | None = None) -> None:
        self._state = state or FuelState()

    @classmethod
    def from_stored(cls, tank_capacity_l, avg_mileage_km_per_l, current_fuel_l) -> FuelModel:
        """Rebuild a model from persisted values.

        Settings that would be rejected by :meth:`set_tank_capacity` or
        :meth:`set_avg_mileage` fall back to the defaults, and the level is
        clamped to ``[0, tank_capacity_l]``.
        """
        capacity = _as_number(tank_capacity_l)
        if capacity is None or capacity <= 0:
            _logger.warning("Stored tank capacity %r is invalid, using default", tank_capacity_l)
            capacity = DEFAULT_TANK_CAPACITY_L

        mileage = _as_number(avg_mileage_km_per_l)
        if mileage is None or mileage < 0:
            _logger.warning("Stored mileage %r is invalid, using default", avg_mileage_km_per_l)
            mileage = DEFAULT_AVG_MILEAGE_KM_PER_L

        current = _as_number(current_fuel_l)
        if current is None:
            _logger.warning("Stored fuel level %r is invalid, assuming a full tank", current_fuel_l)
            current = capacity
        current = min(capacity, max(0.0, current))

        return cls(FuelState(capacity, mileage, current))

    @property
    def current_fuel_l(self) -> float:
        return self._state.current_fuel_l

    @property
    def tank_capacity_l(self) -> float:
        return self._state.tank_capacity_l

    @property
    def avg_mileage_km_per_l(self) -> float:
        return self._state.avg_mileage_km_per_l

    @property
    def estimated_range_km(self) -> float:
        """Distance the current level lasts at the average mileage."""
        return self._state.current_fuel_l * self._state.avg_mileage_km_per_l

    @property
    def fuel_percentage(self) -> float:
        capacity = self._state.tank_capacity_l
        if capacity <= 0:
            return 0.0
        return self._state.current_fuel_l / capacity * 100

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def consume_km(self, distance_km: float) -> float:
        """Deplete fuel for *distance_km* travelled; return litres consumed."""
        mileage = self._state.avg_mileage_km_per_l
        if mileage <= 0:
            return 0.0
        before = self._state.current_fuel_l
        self._state.current_fuel_l = max(0.0, before - distance_km / mileage)
        return before - self._state.current_fuel_l

    def consume_between(self, prev: PositionSample, last: PositionSample) -> float:
        """Deplete fuel for the leg between two consecutive samples."""
        distance_km = distance_meters(prev.coord, last.coord) / 1000
        return self.consume_km(distance_km)

    def refuel(self, liters) -> float:
        """Add *liters* to the tank (clamped to capacity); return the new level.

        Raises
        ------
        InvalidRefuelError
            If *liters* is not a finite number greater than zero.
        """
        amount = _as_number(liters)
        if amount is None or amount <= 0:
            raise InvalidRefuelError(
                f"Please enter a valid number of liters (got {liters!r})."
            )
        state = self._state
        state.current_fuel_l = min(state.tank_capacity_l, state.current_fuel_l + amount)
        _logger.info("Refuelled %.2f L, tank now %.2f L", amount, state.current_fuel_l)
        return state.current_fuel_l

    def set_tank_capacity(self, value) -> None:
        capacity = _as_number(value)
        if capacity is None or capacity <= 0:
            raise InvalidSettingError(f"Tank capacity must be a positive number (got {value!r}).")
        self._state.tank_capacity_l = capacity

    def set_avg_mileage(self, value) -> None:
        mileage = _as_number(value)
        if mileage is None or mileage < 0:
            raise InvalidSettingError(f"Average mileage must be zero or more (got {value!r}).")
        self._state.avg_mileage_km_per_l = mileage

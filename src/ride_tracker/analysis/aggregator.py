"""Ride statistics — folds an ordered sample sequence into distance, speed and area.

Everything is recomputed from the full sequence on each call; nothing is
carried between calls, so there is no accumulated drift.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ride_tracker.geo.geodesy import coverage_area_m2, distance_meters
from ride_tracker.telemetry.models import PositionSample, SessionStats


@dataclass
class RideStats:
    """Derived figures for one sample sequence at one instant."""

    distance_km: float
    elapsed_s: float
    avg_speed_kmh: float
    area_m2: float

    def to_session_stats(self) -> SessionStats:
        return SessionStats(
            km=self.distance_km,
            avg_kmh=self.avg_speed_kmh,
            area_m2=self.area_m2,
        )


def total_distance_m(samples: Sequence[PositionSample]) -> float:
    """Sum of consecutive-pair distances in metres, accumulated left to right.

    A running total that adds each new pair in arrival order produces exactly
    the same float.
    """
    total = 0.0
    for prev, cur in zip(samples, samples[1:]):
        total += distance_meters(prev.coord, cur.coord)
    return total


def total_distance_km(samples: Sequence[PositionSample]) -> float:
    return total_distance_m(samples) / 1000


def elapsed_seconds(
    samples: Sequence[PositionSample],
    started_at: int | None,
    now: int,
) -> float:
    """Seconds since *started_at* (ms), measured against wall-clock *now* (ms).

    Zero when nothing has been recorded or the start time is unset.
    """
    if not samples or not started_at:
        return 0.0
    return (now - started_at) / 1000


def avg_speed_kmh(distance_km: float, elapsed_s: float) -> float:
    if elapsed_s <= 0:
        return 0.0
    return distance_km / (elapsed_s / 3600)


def area_covered_m2(samples: Sequence[PositionSample]) -> float:
    return coverage_area_m2([s.coord for s in samples])


def aggregate(
    samples: Sequence[PositionSample],
    started_at: int | None,
    now: int,
) -> RideStats:
    """Compute all :class:`RideStats` for *samples* at wall-clock *now* (ms)."""
    km = total_distance_km(samples)
    elapsed = elapsed_seconds(samples, started_at, now)
    return RideStats(
        distance_km=km,
        elapsed_s=elapsed,
        avg_speed_kmh=avg_speed_kmh(km, elapsed),
        area_m2=area_covered_m2(samples),
    )

"""Ride statistics derived from the recorded sample sequence."""

from ride_tracker.analysis.aggregator import (
    RideStats,
    aggregate,
    area_covered_m2,
    avg_speed_kmh,
    elapsed_seconds,
    total_distance_km,
    total_distance_m,
)

__all__ = [
    "RideStats",
    "aggregate",
    "area_covered_m2",
    "avg_speed_kmh",
    "elapsed_seconds",
    "total_distance_km",
    "total_distance_m",
]

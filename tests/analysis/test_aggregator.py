"""Tests for ride statistics aggregation."""

from __future__ import annotations

import pytest

from ride_tracker.analysis.aggregator import (
    aggregate,
    avg_speed_kmh,
    elapsed_seconds,
    total_distance_km,
    total_distance_m,
)
from ride_tracker.geo.geodesy import distance_meters
from ride_tracker.telemetry.models import PositionSample

T0 = 1_700_000_000_000


def make_sample(lat: float, lon: float, t_s: float = 0.0) -> PositionSample:
    return PositionSample(lat=lat, lon=lon, timestamp=T0 + int(t_s * 1000))


def _zigzag(n: int) -> list[PositionSample]:
    return [
        make_sample(12.97 + i * 0.0003, 77.59 + (i % 3) * 0.0002, i)
        for i in range(n)
    ]


# ---------------------------------------------------------------------------
# Distance
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("n", [0, 1])
def test_distance_zero_for_fewer_than_two_samples(n):
    assert total_distance_m(_zigzag(n)) == 0.0


def test_distance_matches_running_total_exactly():
    """Adding one leg per arriving sample gives the same float as one pass."""
    samples = _zigzag(25)
    running = 0.0
    for i in range(1, len(samples)):
        running += distance_meters(samples[i - 1].coord, samples[i].coord)
        assert total_distance_m(samples[: i + 1]) == running


def test_distance_km_for_one_leg():
    samples = [make_sample(0.0, 0.0), make_sample(0.0, 0.001, 1)]
    assert total_distance_km(samples) == pytest.approx(0.11119, abs=1e-5)


# ---------------------------------------------------------------------------
# Elapsed time / average speed
# ---------------------------------------------------------------------------


def test_elapsed_zero_without_samples():
    assert elapsed_seconds([], T0, T0 + 5_000) == 0.0


def test_elapsed_zero_without_start():
    assert elapsed_seconds(_zigzag(2), None, T0 + 5_000) == 0.0


def test_elapsed_measured_against_wall_clock_not_last_sample():
    samples = [make_sample(0.0, 0.0), make_sample(0.0, 0.001, 1)]
    assert elapsed_seconds(samples, T0, T0 + 60_000) == 60.0


def test_avg_speed_zero_when_no_time_elapsed():
    assert avg_speed_kmh(1.0, 0.0) == 0.0


def test_avg_speed():
    assert avg_speed_kmh(10.0, 1800.0) == pytest.approx(20.0)


# ---------------------------------------------------------------------------
# aggregate
# ---------------------------------------------------------------------------


def test_aggregate_two_fixes_one_second_apart():
    samples = [make_sample(0.0, 0.0), make_sample(0.0, 0.001, 1)]
    stats = aggregate(samples, T0, T0 + 1_000)

    assert stats.distance_km == pytest.approx(0.11119, abs=1e-5)
    assert stats.elapsed_s == 1.0
    assert stats.avg_speed_kmh == pytest.approx(400.3, abs=0.1)
    assert stats.area_m2 == 0.0


def test_aggregate_empty():
    stats = aggregate([], None, T0)
    assert (stats.distance_km, stats.elapsed_s, stats.avg_speed_kmh, stats.area_m2) == (
        0.0,
        0.0,
        0.0,
        0.0,
    )


def test_to_session_stats():
    samples = [
        make_sample(0.0, 0.0),
        make_sample(0.0, 0.001, 1),
        make_sample(0.001, 0.001, 2),
        make_sample(0.001, 0.0, 3),
    ]
    stats = aggregate(samples, T0, T0 + 36_000).to_session_stats()

    assert stats.km == pytest.approx(0.3336, abs=1e-3)
    assert stats.avg_kmh == pytest.approx(stats.km / 0.01)
    assert stats.area_m2 == pytest.approx(12_321, rel=0.01)

"""Tests for FixParser — browser fix dict to PositionSample."""

from __future__ import annotations

import pytest

from ride_tracker.telemetry.models import PositionSample
from ride_tracker.telemetry.parser import FixParser, sanitize_speed


def make_raw(**overrides) -> dict:
    """Return a minimal valid browser fix."""
    base = {
        "latitude": 12.9716,
        "longitude": 77.5946,
        "accuracy": 5.0,
        "altitude": 920.0,
        "altitudeAccuracy": 3.0,
        "heading": 90.0,
        "speed": 8.0,
        "timestamp": 1_700_000_000_000,
    }
    base.update(overrides)
    return base


@pytest.fixture
def parser() -> FixParser:
    return FixParser(clock=lambda: 42)


def test_parse_returns_position_sample(parser):
    sample = parser.parse(make_raw())
    assert isinstance(sample, PositionSample)
    assert sample.lat == 12.9716
    assert sample.lon == 77.5946
    assert sample.timestamp == 1_700_000_000_000
    assert sample.altitude_accuracy == 3.0


def test_parse_accepts_short_keys(parser):
    sample = parser.parse({"lat": 1.5, "lon": -2.5, "timestamp": 10})
    assert sample.coord == (1.5, -2.5)


def test_missing_timestamp_filled_from_clock(parser):
    raw = make_raw()
    del raw["timestamp"]
    assert parser.parse(raw).timestamp == 42


def test_optional_fields_default_to_none(parser):
    sample = parser.parse({"latitude": 0.0, "longitude": 0.0})
    assert sample.accuracy is None
    assert sample.altitude is None
    assert sample.altitude_accuracy is None
    assert sample.heading is None
    assert sample.speed == 0.0


@pytest.mark.parametrize("speed", [None, -3.0, float("nan"), float("inf"), "fast"])
def test_unusable_speed_becomes_zero(parser, speed):
    assert parser.parse(make_raw(speed=speed)).speed == 0.0


def test_speed_kmh_conversion(parser):
    assert parser.parse(make_raw(speed=10.0)).speed_kmh == pytest.approx(36.0)


def test_heading_clamped_to_compass_range(parser):
    assert parser.parse(make_raw(heading=400.0)).heading == 360.0
    assert parser.parse(make_raw(heading=-5.0)).heading == 0.0


def test_negative_accuracy_clamped(parser):
    assert parser.parse(make_raw(accuracy=-1.0)).accuracy == 0.0


def test_non_finite_optional_becomes_none(parser):
    assert parser.parse(make_raw(altitude=float("nan"))).altitude is None


@pytest.mark.parametrize(
    "raw",
    [
        {"longitude": 1.0},
        {"latitude": 1.0},
        {"latitude": "north", "longitude": 1.0},
    ],
)
def test_bad_coordinates_raise(parser, raw):
    with pytest.raises(ValueError):
        parser.parse(raw)


def test_sanitize_speed_passes_valid_value():
    assert sanitize_speed(4.2) == 4.2
    assert sanitize_speed("4.2") == 4.2
    assert sanitize_speed(float("-inf")) == 0.0


@pytest.mark.parametrize(
    "lat, lon",
    [
        (float("nan"), 0.0),
        ("nan", 0.0),
        (0.0, float("inf")),
        (90.5, 0.0),
        (0.0, -180.5),
    ],
)
def test_unusable_coordinates_raise(parser, lat, lon):
    with pytest.raises(ValueError):
        parser.parse(make_raw(latitude=lat, longitude=lon))


def test_boundary_coordinates_accepted(parser):
    sample = parser.parse(make_raw(latitude=-90.0, longitude=180.0))
    assert sample.coord == (-90.0, 180.0)

"""Tests for the stored shape of samples and archived sessions."""

from __future__ import annotations

from ride_tracker.telemetry.models import ArchivedSession, PositionSample, SessionStats


def test_sample_dict_uses_client_keys():
    sample = PositionSample(lat=1.0, lon=2.0, timestamp=5, speed=3.0, altitude_accuracy=4.0)
    d = sample.to_dict()
    assert d == {
        "lat": 1.0,
        "lon": 2.0,
        "accuracy": None,
        "altitude": None,
        "altitudeAccuracy": 4.0,
        "heading": None,
        "speed": 3.0,
        "timestamp": 5,
    }
    assert PositionSample.from_dict(d) == sample


def test_sample_from_dict_tolerates_missing_speed():
    sample = PositionSample.from_dict({"lat": 1, "lon": 2, "timestamp": 3, "speed": None})
    assert sample.speed == 0.0


def test_archived_session_dict_shape():
    session = ArchivedSession(
        id=1,
        name="Session 2024-01-01 10:00:00",
        created_at=1,
        positions=(PositionSample(lat=0.0, lon=0.0, timestamp=1),),
        stats=SessionStats(km=1.5, avg_kmh=30.0, area_m2=0.0),
    )
    d = session.to_dict()
    assert set(d) == {"id", "name", "createdAt", "positions", "stats"}
    assert d["stats"] == {"km": 1.5, "avgKmh": 30.0, "areaM2": 0.0}
    assert ArchivedSession.from_dict(d) == session

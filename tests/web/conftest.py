"""Shared fixtures for web tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from ride_tracker.telemetry.parser import FixParser
from ride_tracker.web.app import app, get_service
from ride_tracker.web.service import RideService


@pytest.fixture
def service(controller, wall_clock):
    """RideService over the in-memory controller; the ticker polls every 10 ms."""
    svc = RideService(controller, parser=FixParser(clock=wall_clock), poll_interval_s=0.01)
    yield svc
    svc.close()


@pytest.fixture
def client(service):
    """FastAPI test client bound to *service*."""
    app.dependency_overrides[get_service] = lambda: service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_fix(lat: float = 0.0, lon: float = 0.0, speed: float | None = 8.0, **extra) -> dict:
    """Build a browser fix body for ``POST /api/fixes``."""
    body = {"latitude": lat, "longitude": lon, "speed": speed}
    body.update(extra)
    return body

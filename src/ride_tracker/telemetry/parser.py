"""FixParser — converts raw location fixes to PositionSample."""

from __future__ import annotations

import math
import time
from collections.abc import Callable

from ride_tracker.telemetry.models import PositionSample

# raw key → (sample field, clamp_min, clamp_max).  Optional fields keep None.
_OPTIONAL_FIELDS: tuple[tuple[str, str, float | None, float | None], ...] = (
    # raw_key            sample_field         min   max
    ("accuracy",          "accuracy",          0.0,  None),
    ("altitude",          "altitude",          None, None),
    ("altitudeAccuracy",  "altitude_accuracy", 0.0,  None),
    ("heading",           "heading",           0.0,  360.0),
)


def _now_ms() -> int:
    return int(time.time() * 1000)


def sanitize_speed(value) -> float:
    """Return *value* as a non-negative m/s speed; unknown/NaN/negative → 0.

    >>> sanitize_speed(None)
    0.0
    >>> sanitize_speed(-3.0)
    0.0
    """
    try:
        speed = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(speed) or speed < 0:
        return 0.0
    return speed


def _optional(value, lo: float | None, hi: float | None) -> float | None:
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    if lo is not None and value < lo:
        value = lo
    if hi is not None and value > hi:
        value = hi
    return value


class FixParser:
    """Parses a raw fix dict into a :class:`PositionSample`.

    The raw dict uses the browser Geolocation field names
    (``latitude``/``longitude`` or the short ``lat``/``lon``, ``speed``,
    ``altitudeAccuracy`` …).  A missing timestamp is filled from *clock*.

    Raises
    ------
    ValueError
        If latitude or longitude is missing, not a finite number, or outside
        [-90, 90] / [-180, 180].
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._clock = clock or _now_ms

    def parse(self, raw: dict) -> PositionSample:
        lat = raw.get("latitude", raw.get("lat"))
        lon = raw.get("longitude", raw.get("lon"))
        if lat is None or lon is None:
            raise ValueError(f"Fix is missing coordinates: {raw!r}")

        try:
            lat, lon = float(lat), float(lon)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Fix has non-numeric coordinates: {raw!r}") from exc
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise ValueError(f"Fix has non-finite coordinates: {raw!r}")
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
            raise ValueError(f"Fix coordinates out of range: {raw!r}")

        kwargs: dict = {
            "lat": lat,
            "lon": lon,
            "speed": sanitize_speed(raw.get("speed")),
            "timestamp": int(raw.get("timestamp") or self._clock()),
        }
        for raw_key, field, lo, hi in _OPTIONAL_FIELDS:
            kwargs[field] = _optional(raw.get(raw_key), lo, hi)

        return PositionSample(**kwargs)

"""Telemetry data models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PositionSample:
    """A single observed location fix.

    Samples are immutable once recorded.  Serialized with the camelCase keys
    the browser client uses (see :meth:`to_dict`).
    """

    lat: float
    """Latitude in degrees [-90, 90]."""

    lon: float
    """Longitude in degrees [-180, 180]."""

    timestamp: int
    """Milliseconds since the Unix epoch."""

    speed: float = 0.0
    """Ground speed in m/s.  Unknown, non-finite or negative readings are stored as 0."""

    accuracy: float | None = None
    """Horizontal accuracy radius in metres."""

    altitude: float | None = None
    """Altitude in metres."""

    altitude_accuracy: float | None = None
    """Altitude accuracy in metres."""

    heading: float | None = None
    """Heading in degrees clockwise from true north."""

    @property
    def coord(self) -> tuple[float, float]:
        """``(lat, lon)`` pair for the geodesy helpers."""
        return (self.lat, self.lon)

    @property
    def speed_kmh(self) -> float:
        return self.speed * 3.6

    def to_dict(self) -> dict:
        return {
            "lat": self.lat,
            "lon": self.lon,
            "accuracy": self.accuracy,
            "altitude": self.altitude,
            "altitudeAccuracy": self.altitude_accuracy,
            "heading": self.heading,
            "speed": self.speed,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, d: dict) -> PositionSample:
        """Create a sample from its stored dict form (inverse of :meth:`to_dict`)."""
        return cls(
            lat=float(d["lat"]),
            lon=float(d["lon"]),
            timestamp=int(d["timestamp"]),
            speed=float(d.get("speed") or 0.0),
            accuracy=d.get("accuracy"),
            altitude=d.get("altitude"),
            altitude_accuracy=d.get("altitudeAccuracy"),
            heading=d.get("heading"),
        )


@dataclass(frozen=True)
class SessionStats:
    """Summary figures frozen into an archived session at save time."""

    km: float
    avg_kmh: float
    area_m2: float

    def to_dict(self) -> dict:
        return {"km": self.km, "avgKmh": self.avg_kmh, "areaM2": self.area_m2}

    @classmethod
    def from_dict(cls, d: dict) -> SessionStats:
        return cls(
            km=float(d["km"]),
            avg_kmh=float(d["avgKmh"]),
            area_m2=float(d["areaM2"]),
        )


@dataclass(frozen=True)
class ArchivedSession:
    """A saved, immutable recording with its precomputed stats."""

    id: int
    name: str
    created_at: int
    """Milliseconds since the Unix epoch."""

    positions: tuple[PositionSample, ...]
    stats: SessionStats

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at,
            "positions": [p.to_dict() for p in self.positions],
            "stats": self.stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: dict) -> ArchivedSession:
        return cls(
            id=int(d["id"]),
            name=str(d["name"]),
            created_at=int(d["createdAt"]),
            positions=tuple(PositionSample.from_dict(p) for p in d["positions"]),
            stats=SessionStats.from_dict(d["stats"]),
        )

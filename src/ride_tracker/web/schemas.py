"""Pydantic request/response schemas for the Web API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    status: str
    version: str


class StartRequest(BaseModel):
    geolocation_available: bool = True
    permission: str | None = "granted"
    """Browser permission state; None when the permission query failed."""
    confirm: bool = False


class ClearRequest(BaseModel):
    confirm: bool = False


class FixRequest(BaseModel):
    """One browser ``GeolocationPosition`` flattened to its coords + timestamp."""

    model_config = ConfigDict(populate_by_name=True)

    latitude: float
    longitude: float
    accuracy: float | None = None
    altitude: float | None = None
    altitude_accuracy: float | None = Field(default=None, alias="altitudeAccuracy")
    heading: float | None = None
    speed: float | None = None
    timestamp: int | None = None


class FixErrorRequest(BaseModel):
    message: str


class RefuelRequest(BaseModel):
    liters: float | str


class FuelSettingsRequest(BaseModel):
    tank_capacity_l: float | None = None
    avg_mileage_km_per_l: float | None = None


class NotificationRequest(BaseModel):
    permission: str


class CommandResponse(BaseModel):
    recording: bool
    accepted: bool = True
    message: str | None = None


class StatsResponse(BaseModel):
    recording: bool
    sample_count: int
    started_at: int | None
    distance_km: float
    last_speed_kmh: float
    avg_speed_kmh: float
    area_m2: float
    fuel_l: float
    tank_capacity_l: float
    avg_mileage_km_per_l: float
    range_km: float
    fuel_pct: float
    last_error: str | None = None
    last_stop_notified_at: int | None = None


class FuelResponse(BaseModel):
    fuel_l: float
    tank_capacity_l: float
    avg_mileage_km_per_l: float
    range_km: float


class NotificationResponse(BaseModel):
    permission: str

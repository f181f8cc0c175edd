"""FastAPI Web application — ride recording, stats and fuel commands."""

from __future__ import annotations

import os

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException

from ride_tracker import __version__
from ride_tracker.errors import (
    CapabilityUnavailableError,
    ConfirmationRequiredError,
    EmptySessionError,
    LocationPermissionError,
    RecordingActiveError,
    RideError,
)
from ride_tracker.hotpath.notify import LogNotifier
from ride_tracker.session.controller import RideController
from ride_tracker.telemetry.storage import RideStorage
from ride_tracker.web.schemas import (
    ClearRequest,
    CommandResponse,
    FixErrorRequest,
    FixRequest,
    FuelResponse,
    FuelSettingsRequest,
    HealthResponse,
    NotificationRequest,
    NotificationResponse,
    RefuelRequest,
    StartRequest,
    StatsResponse,
)
from ride_tracker.web.service import RideService

load_dotenv()  # loads .env from project root; must run before env vars are consumed

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(title="Ride Tracker", version=__version__)

_DEFAULT_DB = os.environ.get("RIDE_TRACKER_DB", "ride.db")

_service: RideService | None = None

# Most specific first: InvalidRefuelError/InvalidSettingError fall through to ValueError.
_STATUS_BY_ERROR: tuple[tuple[type[Exception], int], ...] = (
    (CapabilityUnavailableError, 400),
    (LocationPermissionError, 403),
    (ConfirmationRequiredError, 409),
    (RecordingActiveError, 409),
    (EmptySessionError, 422),
    (ValueError, 422),
)


def get_service() -> RideService:
    """Return the process-wide service, creating it on first use."""
    global _service
    if _service is None:
        controller = RideController(RideStorage(_DEFAULT_DB), notifier=LogNotifier())
        _service = RideService(controller)
    return _service


def _http_error(exc: Exception) -> HTTPException:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


@app.get("/api/stats", response_model=StatsResponse)
def stats(svc: RideService = Depends(get_service)) -> StatsResponse:
    return StatsResponse(**svc.stats())


@app.get("/api/positions")
def positions(svc: RideService = Depends(get_service)) -> list[dict]:
    """Live sample sequence in recording order."""
    return [p.to_dict() for p in svc.positions()]


@app.get("/api/dashboard")
def dashboard(svc: RideService = Depends(get_service)) -> dict:
    """Display-ready stats for the mini dashboard."""
    return svc.dashboard()


@app.post("/api/ride/start", response_model=CommandResponse)
def start_ride(req: StartRequest, svc: RideService = Depends(get_service)) -> CommandResponse:
    try:
        svc.start(req.geolocation_available, req.permission, confirmed=req.confirm)
    except RideError as exc:
        raise _http_error(exc) from exc
    return CommandResponse(recording=True)


@app.post("/api/ride/stop", response_model=CommandResponse)
def stop_ride(svc: RideService = Depends(get_service)) -> CommandResponse:
    svc.stop()
    return CommandResponse(recording=False)


@app.post("/api/ride/save")
def save_ride(svc: RideService = Depends(get_service)) -> dict:
    """Archive the live session; returns the stored session record."""
    try:
        session = svc.save()
    except RideError as exc:
        raise _http_error(exc) from exc
    return session.to_dict()


@app.post("/api/ride/clear", response_model=CommandResponse)
def clear_ride(req: ClearRequest, svc: RideService = Depends(get_service)) -> CommandResponse:
    try:
        svc.clear(confirmed=req.confirm)
    except RideError as exc:
        raise _http_error(exc) from exc
    return CommandResponse(recording=False)


@app.post("/api/fixes", response_model=CommandResponse)
def push_fix(req: FixRequest, svc: RideService = Depends(get_service)) -> CommandResponse:
    """Append one browser fix.  Fixes arriving while stopped are ignored."""
    try:
        accepted = svc.record_fix(req.model_dump(by_alias=True))
    except ValueError as exc:
        raise _http_error(exc) from exc
    return CommandResponse(
        recording=accepted,
        accepted=accepted,
        message=None if accepted else "Not recording; fix ignored.",
    )


@app.post("/api/fixes/error", response_model=CommandResponse)
def fix_error(req: FixErrorRequest, svc: RideService = Depends(get_service)) -> CommandResponse:
    """The browser's position watch failed; recording stops."""
    svc.fail(req.message)
    return CommandResponse(recording=False, message=f"Geolocation error: {req.message}.")


@app.get("/api/fuel", response_model=FuelResponse)
def fuel(svc: RideService = Depends(get_service)) -> FuelResponse:
    return FuelResponse(**svc.fuel())


@app.post("/api/fuel/refuel", response_model=FuelResponse)
def refuel(req: RefuelRequest, svc: RideService = Depends(get_service)) -> FuelResponse:
    try:
        svc.refuel(req.liters)
    except RideError as exc:
        raise _http_error(exc) from exc
    return FuelResponse(**svc.fuel())


@app.put("/api/fuel/settings", response_model=FuelResponse)
def fuel_settings(
    req: FuelSettingsRequest, svc: RideService = Depends(get_service)
) -> FuelResponse:
    try:
        svc.update_fuel_settings(req.tank_capacity_l, req.avg_mileage_km_per_l)
    except RideError as exc:
        raise _http_error(exc) from exc
    return FuelResponse(**svc.fuel())


@app.get("/api/sessions")
def sessions(svc: RideService = Depends(get_service)) -> list[dict]:
    """Archived sessions, oldest first, in their stored shape."""
    return [s.to_dict() for s in svc.sessions()]


@app.post("/api/notifications", response_model=NotificationResponse)
def notifications(
    req: NotificationRequest, svc: RideService = Depends(get_service)
) -> NotificationResponse:
    state = svc.set_notification_permission(req.permission)
    return NotificationResponse(permission=state.value)

"""Central error types for ride, session and fuel commands.

Every error carries a user-facing message; none of them is fatal.
"""

from __future__ import annotations


class RideError(RuntimeError):
    """Base error for rejected ride commands."""


class CapabilityUnavailableError(RideError):
    """Raised when the platform has no location capability."""


class LocationPermissionError(RideError):
    """Raised when location permission has been denied."""


class ConfirmationRequiredError(RideError):
    """Raised when a destructive action was requested without confirmation."""


class RecordingActiveError(RideError):
    """Raised when a command needs recording to be stopped first."""


class EmptySessionError(RideError):
    """Raised when saving a session with no recorded positions."""


class InvalidRefuelError(RideError, ValueError):
    """Raised when a refuel amount is non-numeric or not positive."""


class InvalidSettingError(RideError, ValueError):
    """Raised when a tank capacity or mileage setting is invalid."""


__all__ = [
    "CapabilityUnavailableError",
    "ConfirmationRequiredError",
    "EmptySessionError",
    "InvalidRefuelError",
    "InvalidSettingError",
    "LocationPermissionError",
    "RecordingActiveError",
    "RideError",
]

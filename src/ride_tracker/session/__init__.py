"""Recording session control."""

from ride_tracker.session.controller import RideController, RideSnapshot

__all__ = ["RideController", "RideSnapshot"]

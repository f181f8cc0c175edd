"""Dashboard formatting and the mini-dashboard mirror."""

from ride_tracker.overlay.mirror import MiniDashboard
from ride_tracker.overlay.renderer import DashboardRenderer

__all__ = ["DashboardRenderer", "MiniDashboard"]

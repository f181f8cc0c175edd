"""MiniDashboard — a read-only mirror of ride stats for a secondary display."""

from __future__ import annotations

from ride_tracker.overlay.renderer import DashboardRenderer
from ride_tracker.session.controller import RideController, RideSnapshot


class MiniDashboard:
    """Keeps the latest rendered stats while open.

    The mirror subscribes to the controller's stats-changed notifications and
    never mutates ride state.

    Parameters
    ----------
    controller:
        The ride controller to mirror.
    renderer:
        Formatter; defaults to :class:`DashboardRenderer`.
    """

    def __init__(
        self,
        controller: RideController,
        renderer: DashboardRenderer | None = None,
    ) -> None:
        self._controller = controller
        self._renderer = renderer or DashboardRenderer()
        self._view: dict | None = None
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def view(self) -> dict | None:
        """Last rendered stats, or None if the mirror is closed."""
        return self._view

    def open(self) -> None:
        """Subscribe and render the current stats immediately."""
        if self._open:
            return
        self._open = True
        self._controller.subscribe(self._on_stats)
        self._on_stats(self._controller.snapshot())

    def refresh(self) -> dict | None:
        """Re-render from a fresh snapshot (time-dependent figures advance)."""
        if self._open:
            self._on_stats(self._controller.snapshot())
        return self._view

    def close(self) -> None:
        """Unsubscribe and drop the rendered view."""
        if not self._open:
            return
        self._controller.unsubscribe(self._on_stats)
        self._open = False
        self._view = None

    def _on_stats(self, snap: RideSnapshot) -> None:
        self._view = self._renderer.render(snap)

"""Notifiers — logging notifier for headless runs, NullNotifier for tests."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ride_tracker.telemetry.source import PermissionState

_logger = logging.getLogger(__name__)


@dataclass
class NotificationConfig:
    """Title and body of the stop notification."""

    stop_title: str = "Bike Stopped"
    stop_body: str = "Your bike has been stationary for 15 seconds."


class NullNotifier:
    """No-op notifier; records calls for test assertions."""

    def __init__(self, permission: PermissionState = PermissionState.GRANTED) -> None:
        self.permission = permission
        self.sent: list[tuple[str, str]] = []

    def notify(self, title: str, body: str) -> None:
        self.sent.append((title, body))


class LogNotifier:
    """Emits notifications as ``WARNING`` log records.

    Stands in for a desktop notification service when the tracker runs
    headless (scripts, the web service).  A browser client polls the stats
    endpoint and raises the real notification itself.
    """

    def __init__(self, permission: PermissionState = PermissionState.GRANTED) -> None:
        self.permission = permission

    def notify(self, title: str, body: str) -> None:
        _logger.warning("%s: %s", title, body)

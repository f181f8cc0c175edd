"""Live fix stream, stop detection and notifications."""

from ride_tracker.hotpath.engine import RideEngine
from ride_tracker.hotpath.event_stream import FixEvent, FixEventStream
from ride_tracker.hotpath.notify import LogNotifier, NotificationConfig, NullNotifier
from ride_tracker.hotpath.stop_detector import StopDetector, StopState

__all__ = [
    "FixEvent",
    "FixEventStream",
    "LogNotifier",
    "NotificationConfig",
    "NullNotifier",
    "RideEngine",
    "StopDetector",
    "StopState",
]

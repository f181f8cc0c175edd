"""Location fix acquisition, models and persistence.

Public API
----------
PositionSample      - single recorded location fix
SessionStats        - summary figures of an archived session
ArchivedSession     - saved, immutable recording
FixParser           - raw fix dict → PositionSample
FileFixProvider     - replays fixes from a JSON-lines log
DeclaredAccess      - location access reported by a remote client
PermissionState     - granted / denied / default
FixError            - raised when a fix stream fails
RideStorage         - SQLite key-value persistence
InMemoryStore       - dict-backed store for tests
PersistentState     - one stored key mirrored in memory
"""

from ride_tracker.telemetry.models import ArchivedSession, PositionSample, SessionStats
from ride_tracker.telemetry.parser import FixParser
from ride_tracker.telemetry.source import (
    DeclaredAccess,
    FileFixProvider,
    FixError,
    PermissionState,
)
from ride_tracker.telemetry.storage import InMemoryStore, PersistentState, RideStorage

__all__ = [
    "ArchivedSession",
    "DeclaredAccess",
    "FileFixProvider",
    "FixError",
    "FixParser",
    "InMemoryStore",
    "PermissionState",
    "PersistentState",
    "PositionSample",
    "RideStorage",
    "SessionStats",
]

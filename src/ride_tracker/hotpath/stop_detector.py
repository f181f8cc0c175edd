"""StopDetector — debounced "vehicle stopped" notification intent."""

from __future__ import annotations

import enum
import time
from collections.abc import Callable

STOP_THRESHOLD_KMH = 1.0
STOP_WINDOW_S = 15.0


class StopState(str, enum.Enum):
    MOVING = "moving"
    PENDING_STOP = "pending_stop"


class StopDetector:
    """Fires once when speed stays below *threshold_kmh* for *window_s* seconds.

    The pending timer is a deadline on a monotonic clock rather than a
    background thread: the owner calls :meth:`poll` from its event loop, so a
    cancelled detector can never fire later.

    - A low-speed sample arms the deadline if nothing is armed.  Further
      low-speed samples leave it alone.
    - A sample at or above the threshold disarms it without firing.
    - :meth:`poll` returns True exactly once after the deadline passes, then
      the detector is idle until the next low-speed sample.

    Parameters
    ----------
    threshold_kmh:
        Speeds strictly below this count as stopped.
    window_s:
        How long the vehicle must stay stopped before firing.
    clock:
        Monotonic seconds source; injected by tests.
    """

    def __init__(
        self,
        threshold_kmh: float = STOP_THRESHOLD_KMH,
        window_s: float = STOP_WINDOW_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._threshold = threshold_kmh
        self._window = window_s
        self._clock = clock
        self._deadline: float | None = None

    @property
    def state(self) -> StopState:
        return StopState.MOVING if self._deadline is None else StopState.PENDING_STOP

    @property
    def armed(self) -> bool:
        return self._deadline is not None

    def observe(self, speed_kmh: float) -> None:
        """Feed the speed of a newly recorded sample."""
        if speed_kmh < self._threshold:
            if self._deadline is None:
                self._deadline = self._clock() + self._window
        else:
            self._deadline = None

    def poll(self) -> bool:
        """Return True if the stop window has just elapsed."""
        if self._deadline is None or self._clock() < self._deadline:
            return False
        self._deadline = None
        return True

    def cancel(self) -> None:
        """Disarm any pending timer."""
        self._deadline = None

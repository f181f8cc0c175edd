"""RideEngine — connects FixEventStream to the ride controller."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ride_tracker.session.controller import RideController


class RideEngine:
    """Applies streamed fixes to a :class:`RideController` on the caller's thread.

    Parameters
    ----------
    stream:
        A :class:`~ride_tracker.hotpath.event_stream.FixEventStream`.
    controller:
        The ride controller that owns session, fuel and stop-detector state.
    """

    def __init__(self, stream, controller: RideController) -> None:
        self._stream = stream
        self._controller = controller

    def start(self, access, confirmed: bool = False) -> None:
        """Start recording, then the underlying fix stream.

        Controller errors propagate before the stream is started.
        """
        self._controller.start(access, confirmed=confirmed)
        self._stream.start()

    def stop(self) -> None:
        """Stop the fix stream and the recording."""
        self._stream.stop()
        self._controller.stop()

    def tick(self, timeout: float = 0.0) -> int:
        """Apply at most one queued event, then poll the stop detector.

        Returns the number of notifications fired (0 or 1).
        """
        event = self._stream.get_event(timeout=timeout)
        if event is not None:
            if event.error is not None:
                self._controller.fail(event.error)
            elif event.sample is not None:
                self._controller.record_fix(event.sample)
        return 1 if self._controller.poll() else 0

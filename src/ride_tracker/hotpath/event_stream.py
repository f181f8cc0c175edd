"""FixEventStream — background fix polling with drop-oldest overflow handling."""

from __future__ import annotations

import contextlib
import logging
import queue
import threading
import time
from dataclasses import dataclass

from ride_tracker.telemetry.models import PositionSample
from ride_tracker.telemetry.source import FixError

_logger = logging.getLogger(__name__)


@dataclass
class FixEvent:
    """A parsed fix, or the error that ended the stream."""

    sample: PositionSample | None
    timestamp: float  # time.monotonic() seconds
    error: str | None = None


class FixEventStream:
    """Polls a provider+parser pair at *target_hz* and enqueues :class:`FixEvent`.

    The polling thread only produces events; the consumer applies them, so
    all state changes stay on one thread.  When the internal queue is full
    the *oldest* event is discarded.  A :class:`FixError` from the provider
    is delivered as an error event and ends polling, since the device stream
    is assumed dead after an error.

    Parameters
    ----------
    provider:
        Object with ``read_fix() -> dict | None``.
    parser:
        Object with ``parse(raw: dict) -> PositionSample``.
    target_hz:
        Polling frequency in Hz.
    queue_maxsize:
        Maximum number of events buffered before drop-oldest kicks in.
    """

    def __init__(
        self,
        provider,
        parser,
        target_hz: float = 1.0,
        queue_maxsize: int = 120,
    ) -> None:
        self._provider = provider
        self._parser = parser
        self._interval = 1.0 / target_hz
        self._queue: queue.Queue[FixEvent] = queue.Queue(maxsize=queue_maxsize)
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the background polling thread."""
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name="FixStream")
        self._thread.start()

    def stop(self) -> None:
        """Signal the polling thread to stop and join it."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def get_event(self, timeout: float = 0.1) -> FixEvent | None:
        """Return the next queued event, or None if none arrives within *timeout* s."""
        try:
            if timeout <= 0:
                return self._queue.get_nowait()
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def queue_size(self) -> int:
        """Return the current number of buffered events."""
        return self._queue.qsize()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(self) -> None:
        while not self._stop_event.is_set():
            t0 = time.monotonic()
            try:
                raw = self._provider.read_fix()
            except FixError as exc:
                self._enqueue(FixEvent(sample=None, timestamp=t0, error=str(exc)))
                return
            if raw:
                try:
                    sample = self._parser.parse(raw)
                except ValueError as exc:
                    _logger.warning("Dropping unparseable fix: %s", exc)
                else:
                    self._enqueue(FixEvent(sample=sample, timestamp=t0))
            elapsed = time.monotonic() - t0
            wait = self._interval - elapsed
            if wait > 0:
                self._stop_event.wait(wait)

    def _enqueue(self, event: FixEvent) -> None:
        """Put *event* in the queue; drop oldest if full."""
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            with contextlib.suppress(queue.Empty):
                self._queue.get_nowait()
            with contextlib.suppress(queue.Full):
                self._queue.put_nowait(event)

"""Replay a recorded fix log through the live ride engine.

The log is JSON lines, one browser-style fix per line, e.g.::

    {"latitude": 12.97, "longitude": 77.59, "speed": 8.3, "timestamp": 1700000000000}

Fixes are replayed at ``--hz`` on a background stream and applied on the main
thread, exactly as a live device would feed them.  Press Ctrl+C to stop early.

Usage:
  uv run python scripts/replay_ride.py ride.jsonl
  uv run python scripts/replay_ride.py ride.jsonl --db ride.db --hz 5 --save
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time

from dotenv import load_dotenv

load_dotenv()

from ride_tracker.errors import RideError  # noqa: E402
from ride_tracker.hotpath.engine import RideEngine  # noqa: E402
from ride_tracker.hotpath.event_stream import FixEventStream  # noqa: E402
from ride_tracker.hotpath.notify import LogNotifier  # noqa: E402
from ride_tracker.overlay.renderer import DashboardRenderer  # noqa: E402
from ride_tracker.session.controller import RideController  # noqa: E402
from ride_tracker.telemetry.parser import FixParser  # noqa: E402
from ride_tracker.telemetry.source import FileFixProvider  # noqa: E402
from ride_tracker.telemetry.storage import RideStorage  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description="Replay a fix log through the ride tracker")
    ap.add_argument("log", help="JSON-lines fix log")
    ap.add_argument(
        "--db",
        default=os.environ.get("RIDE_TRACKER_DB", "ride.db"),
        help="SQLite database path",
    )
    ap.add_argument("--hz", type=float, default=1.0, help="Replay rate in fixes per second")
    ap.add_argument("--save", action="store_true", help="Archive the session when done")
    ap.add_argument(
        "--discard",
        action="store_true",
        help="Discard an unsaved session left in the database",
    )
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    storage = RideStorage(args.db)
    provider = FileFixProvider(args.log)
    controller = RideController(storage, notifier=LogNotifier())
    stream = FixEventStream(provider, FixParser(), target_hz=args.hz)
    engine = RideEngine(stream, controller)
    renderer = DashboardRenderer()

    try:
        engine.start(provider, confirmed=args.discard)
    except RideError as exc:
        print(f"× {exc}", file=sys.stderr)
        provider.close()
        storage.close()
        sys.exit(1)

    print(f"Replaying {args.log} at {args.hz:g} Hz. Ctrl+C to stop.\n")
    print(f"{'points':>6}  {'km/h':>6}  {'km':>7}  {'avg':>6}  {'fuel L':>6}  {'range':>5}")
    print("-" * 46)

    try:
        while controller.recording:
            engine.tick(timeout=0.1)
            if provider.exhausted and stream.queue_size() == 0:
                break
            snap = controller.snapshot()
            view = renderer.render(snap)
            print(
                f"\r{snap.sample_count:>6}  {view['speed']:>6}  "
                f"{view['distance']:>7}  {view['avg_speed']:>6}  "
                f"{view['fuel']:>6}  {view['range']:>5}",
                end="",
                flush=True,
            )
            time.sleep(0.01)
    except KeyboardInterrupt:
        print("\n\nReplay interrupted.")
    finally:
        engine.stop()
        provider.close()

    snap = controller.snapshot()
    print(f"\n\nRecorded {snap.sample_count} points, {snap.distance_km:.2f} km, "
          f"area {snap.area_m2:.0f} m², fuel left {snap.fuel_l:.2f} L")
    if snap.last_error:
        print(f"Stopped by error: {snap.last_error}")

    if args.save:
        try:
            session = controller.save()
        except RideError as exc:
            print(f"× Could not save: {exc}", file=sys.stderr)
        else:
            print(f"Saved {session.name} (id {session.id})")
    storage.close()


if __name__ == "__main__":
    main()

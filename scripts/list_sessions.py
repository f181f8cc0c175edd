"""List archived ride sessions stored in the database.

Usage:
  uv run python scripts/list_sessions.py
  uv run python scripts/list_sessions.py --db ride.db --json
"""

from __future__ import annotations

import argparse
import json
import os

from dotenv import load_dotenv

load_dotenv()

from ride_tracker.session.controller import RideController  # noqa: E402
from ride_tracker.telemetry.storage import RideStorage  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description="List saved ride sessions")
    ap.add_argument(
        "--db",
        default=os.environ.get("RIDE_TRACKER_DB", "ride.db"),
        help="SQLite database path",
    )
    ap.add_argument("--json", action="store_true", help="Print the raw stored records")
    args = ap.parse_args()

    storage = RideStorage(args.db)
    try:
        sessions = RideController(storage).sessions
    finally:
        storage.close()

    if args.json:
        print(json.dumps([s.to_dict() for s in sessions], indent=2))
        return

    if not sessions:
        print("No saved sessions.")
        return

    print(f"{'id':>14}  {'points':>6}  {'km':>7}  {'avg km/h':>8}  {'area m²':>9}  name")
    print("-" * 72)
    for s in sessions:
        print(
            f"{s.id:>14}  {len(s.positions):>6}  {s.stats.km:>7.2f}  "
            f"{s.stats.avg_kmh:>8.1f}  {s.stats.area_m2:>9.0f}  {s.name}"
        )


if __name__ == "__main__":
    main()

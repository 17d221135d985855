#!/usr/bin/env python3
"""Fast-forward a tracking number through its whole route.

Evaluates the tracker against a simulated clock that advances in fixed
steps, printing every status transition and the countdown at that point.
Useful for eyeballing a route definition without waiting a day.

Usage
-----
::

    python scripts/simulate_route.py TM123456789
    python scripts/simulate_route.py TM555000111 --step 15 --catalog routes.json

Options::

    --step MINUTES      Simulated minutes per evaluation (default: 10)
    --backdate MINUTES  Fix the initial backdate instead of randomizing it
    --catalog FILE      Load routes from FILE instead of the demo catalog
    --json              Output transitions as machine-readable JSON
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from parceltrack import (  # noqa: E402
    DEMO_CATALOG,
    NotificationDispatcher,
    ParcelTracker,
    RouteCatalog,
    StatusChangeEvent,
    TrackerConfig,
    TrackingNotFoundError,
    TrackingStateStore,
    format_countdown,
)
from parceltrack._constants import MS_PER_MINUTE  # noqa: E402

LOG = logging.getLogger("simulate_route")


class _SimClock:
    def __init__(self, start_ms: int) -> None:
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, minutes: int) -> None:
        self.now_ms += minutes * MS_PER_MINUTE


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("tracking_number")
    parser.add_argument("--step", type=int, default=10, help="Simulated minutes per evaluation")
    parser.add_argument("--backdate", type=int, default=None, help="Fixed initial backdate in minutes")
    parser.add_argument("--catalog", help="Route catalog JSON file")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.step <= 0:
        print("--step must be positive", file=sys.stderr)
        return 1

    catalog = RouteCatalog.from_json_file(args.catalog) if args.catalog else DEMO_CATALOG
    clock = _SimClock(int(time.time() * 1000))
    config = TrackerConfig()
    if args.backdate is not None:
        store = TrackingStateStore(randint=lambda _low, _high: args.backdate)
    else:
        store = TrackingStateStore(max_backdate_minutes=config.max_backdate_minutes)
    tracker = ParcelTracker(
        config,
        catalog=catalog,
        store=store,
        dispatcher=NotificationDispatcher(toast=lambda msg: LOG.debug("toast: %s", msg)),
        clock=clock,
    )

    transitions: list[dict[str, Any]] = []

    def _record(event: StatusChangeEvent) -> None:
        transitions.append(
            {
                "at_minute": (clock.now_ms - start_ms) // MS_PER_MINUTE,
                "from": event.previous.value,
                "to": event.current.value,
                "title": event.title,
                "countdown": format_countdown(snapshot.status.eta_ms, clock.now_ms),
            }
        )

    try:
        snapshot = tracker.track(args.tracking_number)
    except TrackingNotFoundError as exc:
        print(f"Unknown tracking number: {exc.tracking_number}", file=sys.stderr)
        return 2

    start_ms = tracker.store.get_start_time(args.tracking_number) or clock.now_ms
    tracker.notifier.add_listener(_record)

    if not args.json:
        print(f"{args.tracking_number} ({snapshot.status.carrier}) starts at: {snapshot.status.status_text}")

    while snapshot.status.countdown != "Arrived":
        clock.advance(args.step)
        snapshot = tracker.track(args.tracking_number)

    if args.json:
        print(json.dumps({"tracking_number": args.tracking_number, "transitions": transitions}, indent=2))
        return 0

    for row in transitions:
        print(f"  +{row['at_minute']:>5} min  {row['from']:<16} -> {row['to']:<16} {row['title']}")
    print(f"Arrived after {(clock.now_ms - start_ms) // MS_PER_MINUTE} simulated minutes")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

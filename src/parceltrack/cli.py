"""Command-line interface.

Usage
-----
::

    parceltrack track TM123456789
    parceltrack track tm987654321 --watch --interval 5
    parceltrack track TM555000111 --json
    parceltrack routes
    parceltrack theme toggle
    parceltrack serve --port 8080

State is kept in memory unless ``--storage`` (or ``PARCELTRACK_STORAGE_PATH``)
names a JSON file.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
import sys
from collections.abc import Sequence
from datetime import datetime

from parceltrack._constants import THEME_DARK, THEME_LIGHT
from parceltrack.config import TrackerConfig
from parceltrack.exceptions import InvalidTrackingNumberError, ParcelTrackError, TrackingNotFoundError
from parceltrack.models.view import TrackingSnapshot
from parceltrack.notifications import NotificationDispatcher
from parceltrack.poller import PollingDriver
from parceltrack.tracker import ParcelTracker
from parceltrack.web import run_server

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2


def _fmt_ms(value: int) -> str:
    return datetime.fromtimestamp(value / 1000).astimezone().strftime("%Y-%m-%d %H:%M:%S %Z")


def _toast(message: str) -> None:
    print(f"[notice] {message}", file=sys.stderr)


def format_snapshot(snapshot: TrackingSnapshot) -> str:
    status = snapshot.status
    lines = [
        f"Tracking: {status.tracking_number}",
        f"Carrier:  {status.carrier}",
        f"Status:   {status.status_text}",
        f"ETA:      {status.countdown} ({_fmt_ms(status.eta_ms)})",
        f"Updated:  {_fmt_ms(status.last_update_ms)}",
        "",
    ]
    for entry in snapshot.timeline.entries:
        marker = ">" if entry.is_current else " "
        lines.append(
            f"{marker} {_fmt_ms(entry.timestamp_ms)}  {entry.title:<20} [{entry.status_label}] "
            f"{entry.location} ({entry.latitude:.3f}, {entry.longitude:.3f})"
        )
    return "\n".join(lines)


def _print_snapshot(snapshot: TrackingSnapshot, as_json: bool) -> None:
    if as_json:
        print(json.dumps(snapshot.model_dump(mode="json"), indent=2))
    else:
        print(format_snapshot(snapshot))
        print()


async def _watch(tracker: ParcelTracker, tracking_number: str, interval: float | None, as_json: bool) -> None:
    async with PollingDriver(
        tracker,
        interval=interval,
        consumers=[lambda snapshot: _print_snapshot(snapshot, as_json)],
    ) as driver:
        driver.start_tracking(tracking_number)
        await asyncio.Event().wait()


def _cmd_track(tracker: ParcelTracker, args: argparse.Namespace) -> int:
    tracking_number = tracker.lookup(args.tracking_number)
    if not args.watch:
        _print_snapshot(tracker.track(tracking_number), args.json)
        return EXIT_OK
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_watch(tracker, tracking_number, args.interval, args.json))
    return EXIT_OK


def _cmd_routes(tracker: ParcelTracker, args: argparse.Namespace) -> int:
    for tracking_number in tracker.catalog:
        route = tracker.catalog.require_route(tracking_number)
        print(f"{tracking_number}  {route.carrier:<12} {len(route.events)} events, {route.total_minutes} min")
    return EXIT_OK


def _cmd_theme(tracker: ParcelTracker, args: argparse.Namespace) -> int:
    if args.value == "toggle":
        print(tracker.store.toggle_theme())
    elif args.value is not None:
        tracker.store.set_theme(args.value)
        print(args.value)
    else:
        print(tracker.store.get_theme())
    return EXIT_OK


def _cmd_serve(tracker: ParcelTracker, args: argparse.Namespace) -> int:
    run_server(tracker, host=args.host, port=args.port)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="parceltrack", description="Simulated parcel tracking")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--storage", help="JSON file for persisted tracking state")
    parser.add_argument("--catalog", help="JSON file with route definitions")

    sub = parser.add_subparsers(dest="command", required=True)

    track = sub.add_parser("track", help="Show the current status of a tracking number")
    track.add_argument("tracking_number")
    track.add_argument("--watch", action="store_true", help="Keep polling and print every update")
    track.add_argument("--interval", type=float, default=None, help="Polling interval in seconds")
    track.add_argument("--json", action="store_true", help="Output as machine-readable JSON")
    track.set_defaults(func=_cmd_track)

    routes = sub.add_parser("routes", help="List known tracking numbers")
    routes.set_defaults(func=_cmd_routes)

    theme = sub.add_parser("theme", help="Show or change the theme preference")
    theme.add_argument("value", nargs="?", choices=[THEME_DARK, THEME_LIGHT, "toggle"])
    theme.set_defaults(func=_cmd_theme)

    serve = sub.add_parser("serve", help="Run the JSON HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8080)
    serve.set_defaults(func=_cmd_serve)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, str] = {}
    if args.storage:
        overrides["storage_path"] = args.storage
    if args.catalog:
        overrides["catalog_path"] = args.catalog

    try:
        config = TrackerConfig.from_env(**overrides)
        tracker = ParcelTracker.from_config(config, dispatcher=NotificationDispatcher(toast=_toast))
        return int(args.func(tracker, args))
    except TrackingNotFoundError:
        print("Not found in demo. Use one of the sample numbers.", file=sys.stderr)
        return EXIT_NOT_FOUND
    except InvalidTrackingNumberError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_ERROR
    except ParcelTrackError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())

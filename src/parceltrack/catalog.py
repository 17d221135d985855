"""Read-only catalog of known tracking numbers and their routes."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from parceltrack.exceptions import ParcelTrackConfigError, TrackingNotFoundError
from parceltrack.models.route import Route

_logger = logging.getLogger(__name__)


class RouteCatalog:
    """Immutable mapping of tracking number to :class:`Route`.

    Lookups are case-sensitive; normalize user input with
    :func:`parceltrack.links.normalize_tracking_number` first.
    """

    def __init__(self, routes: Mapping[str, Route]) -> None:
        self._routes: dict[str, Route] = dict(routes)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RouteCatalog:
        """Build a catalog from ``{tracking_number: {"carrier": ..., "events": [...]}}``.

        Event dicts may use either snake_case or the camelCase keys of the
        demo data (``tsOffsetMin``, ``lat``, ``lng``, ``statusKey``).
        """
        routes: dict[str, Route] = {}
        for tracking_number, raw in data.items():
            try:
                routes[tracking_number] = Route.model_validate(raw)
            except ValidationError as exc:
                raise ParcelTrackConfigError(f"Invalid route for {tracking_number}: {exc}") from exc
        return cls(routes)

    @classmethod
    def from_json_file(cls, path: str | Path) -> RouteCatalog:
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ParcelTrackConfigError(f"Cannot load route catalog from {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ParcelTrackConfigError(f"Route catalog {path} must be a JSON object")
        catalog = cls.from_mapping(data)
        _logger.debug("Loaded %d routes from %s", len(catalog), path)
        return catalog

    def get_route(self, tracking_number: str) -> Route | None:
        return self._routes.get(tracking_number)

    def require_route(self, tracking_number: str) -> Route:
        """Return the route or raise :class:`TrackingNotFoundError`."""
        route = self._routes.get(tracking_number)
        if route is None:
            raise TrackingNotFoundError(
                f"Tracking number {tracking_number!r} not found",
                tracking_number=tracking_number,
            )
        return route

    @property
    def tracking_numbers(self) -> tuple[str, ...]:
        return tuple(self._routes)

    def __contains__(self, tracking_number: object) -> bool:
        return tracking_number in self._routes

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)


_DEMO_ROUTES: dict[str, dict[str, Any]] = {
    "TM123456789": {
        "carrier": "MockExpress",
        "events": [
            {"title": "Label created", "tsOffsetMin": 0, "lat": 34.0522, "lng": -118.2437, "location": "Los Angeles, CA", "statusKey": "created"},
            {"title": "Picked up", "tsOffsetMin": 60, "lat": 34.10, "lng": -118.30, "location": "Los Angeles, CA", "statusKey": "picked"},
            {"title": "In transit", "tsOffsetMin": 240, "lat": 36.1699, "lng": -115.1398, "location": "Las Vegas, NV", "statusKey": "in_transit"},
            {"title": "Arrived at facility", "tsOffsetMin": 360, "lat": 39.7392, "lng": -104.9903, "location": "Denver, CO", "statusKey": "facility"},
            {"title": "Out for delivery", "tsOffsetMin": 1320, "lat": 39.742, "lng": -104.99, "location": "Denver, CO", "statusKey": "out_for_delivery"},
            {"title": "Delivered", "tsOffsetMin": 1440, "lat": 39.742, "lng": -104.99, "location": "Denver, CO", "statusKey": "delivered"},
        ],
    },
    "TM987654321": {
        "carrier": "RapidShip",
        "events": [
            {"title": "Label created", "tsOffsetMin": 0, "lat": 40.7128, "lng": -74.0060, "location": "New York, NY", "statusKey": "created"},
            {"title": "In transit", "tsOffsetMin": 180, "lat": 41.2033, "lng": -77.1945, "location": "Pennsylvania, USA", "statusKey": "in_transit"},
            {"title": "Arrived at facility", "tsOffsetMin": 360, "lat": 39.9526, "lng": -75.1652, "location": "Philadelphia, PA", "statusKey": "facility"},
            {"title": "Out for delivery", "tsOffsetMin": 1260, "lat": 39.9526, "lng": -75.1652, "location": "Philadelphia, PA", "statusKey": "out_for_delivery"},
            {"title": "Delivered", "tsOffsetMin": 1380, "lat": 39.9526, "lng": -75.1652, "location": "Philadelphia, PA", "statusKey": "delivered"},
        ],
    },
    "TM555000111": {
        "carrier": "ParcelGo",
        "events": [
            {"title": "Label created", "tsOffsetMin": 0, "lat": 47.6062, "lng": -122.3321, "location": "Seattle, WA", "statusKey": "created"},
            {"title": "Picked up", "tsOffsetMin": 90, "lat": 47.7, "lng": -122.33, "location": "Seattle, WA", "statusKey": "picked"},
            {"title": "In transit", "tsOffsetMin": 360, "lat": 45.5152, "lng": -122.6784, "location": "Portland, OR", "statusKey": "in_transit"},
            {"title": "Arrived at facility", "tsOffsetMin": 720, "lat": 44.0521, "lng": -123.0868, "location": "Eugene, OR", "statusKey": "facility"},
            {"title": "Out for delivery", "tsOffsetMin": 1320, "lat": 37.7749, "lng": -122.4194, "location": "San Francisco, CA", "statusKey": "out_for_delivery"},
            {"title": "Delivered", "tsOffsetMin": 1440, "lat": 37.7749, "lng": -122.4194, "location": "San Francisco, CA", "statusKey": "delivered"},
        ],
    },
}

DEMO_CATALOG = RouteCatalog.from_mapping(_DEMO_ROUTES)

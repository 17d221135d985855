"""JSON HTTP surface built on :mod:`aiohttp.web`.

Endpoints::

    GET  /api/track?tn=TM123456789   snapshot (unknown/absent tn -> default)
    POST /api/track                  {"tracking_number": "..."} user input
    GET  /api/routes                 known tracking numbers
    GET  /api/theme                  {"theme": "light"}
    POST /api/theme/toggle           {"theme": "dark"}
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from aiohttp import web

from parceltrack.exceptions import InvalidTrackingNumberError, TrackingNotFoundError, TrackingStateError
from parceltrack.links import build_share_url
from parceltrack.tracker import ParcelTracker

_logger = logging.getLogger(__name__)

TRACKER_KEY = web.AppKey("tracker", ParcelTracker)

_Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def _error(status: int, message: str, **extra: Any) -> web.Response:
    return web.json_response({"error": message, **extra}, status=status)


@web.middleware
async def _error_middleware(request: web.Request, handler: _Handler) -> web.StreamResponse:
    try:
        return await handler(request)
    except TrackingNotFoundError as exc:
        return _error(404, "Not found in demo. Use one of the sample numbers.", tracking_number=exc.tracking_number)
    except InvalidTrackingNumberError as exc:
        return _error(400, str(exc))
    except TrackingStateError as exc:
        _logger.warning("Corrupt tracking state for key %s", exc.key, exc_info=True)
        return _error(500, str(exc))


def _share_base(request: web.Request) -> str:
    return f"{request.url.origin()}/"


def _snapshot_response(request: web.Request, tracking_number: str) -> web.Response:
    tracker = request.app[TRACKER_KEY]
    snapshot = tracker.track(tracking_number)
    payload = snapshot.model_dump(mode="json")
    payload["share_url"] = build_share_url(_share_base(request), tracking_number)
    return web.json_response(payload)


async def handle_get_track(request: web.Request) -> web.Response:
    tracker = request.app[TRACKER_KEY]
    tracking_number = tracker.resolve_link(request.query.get("tn"))
    return _snapshot_response(request, tracking_number)


async def handle_post_track(request: web.Request) -> web.Response:
    try:
        body = await request.json()
    except ValueError:
        return _error(400, "Request body must be JSON")
    if not isinstance(body, dict):
        return _error(400, "Request body must be a JSON object")
    raw = body.get("tracking_number")
    tracker = request.app[TRACKER_KEY]
    tracking_number = tracker.lookup(raw if isinstance(raw, str) else "")
    return _snapshot_response(request, tracking_number)


async def handle_routes(request: web.Request) -> web.Response:
    catalog = request.app[TRACKER_KEY].catalog
    routes = []
    for tracking_number in catalog:
        route = catalog.require_route(tracking_number)
        routes.append({"tracking_number": tracking_number, "carrier": route.carrier, "events": len(route.events)})
    return web.json_response({"routes": routes})


async def handle_get_theme(request: web.Request) -> web.Response:
    return web.json_response({"theme": request.app[TRACKER_KEY].store.get_theme()})


async def handle_toggle_theme(request: web.Request) -> web.Response:
    return web.json_response({"theme": request.app[TRACKER_KEY].store.toggle_theme()})


def create_app(tracker: ParcelTracker) -> web.Application:
    app = web.Application(middlewares=[_error_middleware])
    app[TRACKER_KEY] = tracker
    app.router.add_get("/api/track", handle_get_track)
    app.router.add_post("/api/track", handle_post_track)
    app.router.add_get("/api/routes", handle_routes)
    app.router.add_get("/api/theme", handle_get_theme)
    app.router.add_post("/api/theme/toggle", handle_toggle_theme)
    return app


def run_server(tracker: ParcelTracker, *, host: str = "127.0.0.1", port: int = 8080) -> None:
    web.run_app(create_app(tracker), host=host, port=port)

"""Data models for routes, derived sessions and view projections."""

from parceltrack.models.route import Route, ShipmentEvent, StatusKey
from parceltrack.models.session import TrackingSession
from parceltrack.models.view import MapView, StatusView, TimelineEntry, TimelineView, TrackingSnapshot

__all__ = [
    "MapView",
    "Route",
    "ShipmentEvent",
    "StatusKey",
    "StatusView",
    "TimelineEntry",
    "TimelineView",
    "TrackingSession",
    "TrackingSnapshot",
]

"""parceltrack - Simulated real-time parcel tracking."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("parceltrack")
except PackageNotFoundError:
    __version__ = "0+local"
from parceltrack.catalog import DEMO_CATALOG, RouteCatalog
from parceltrack.config import TrackerConfig
from parceltrack.engine import derive_state, format_countdown
from parceltrack.exceptions import (
    InvalidTrackingNumberError,
    NotificationError,
    NotificationPermissionDeniedError,
    NotificationUnsupportedError,
    ParcelTrackConfigError,
    ParcelTrackError,
    TrackingNotFoundError,
    TrackingStateError,
)
from parceltrack.models import (
    MapView,
    Route,
    ShipmentEvent,
    StatusKey,
    StatusView,
    TimelineEntry,
    TimelineView,
    TrackingSession,
    TrackingSnapshot,
)
from parceltrack.notifications import NotificationDispatcher, PermissionState, StatusChangeNotifier
from parceltrack.poller import PollingDriver, PollingSession
from parceltrack.state import JsonFileKeyValueStore, MemoryKeyValueStore, StatusChangeEvent, TrackingStateStore
from parceltrack.tracker import ParcelTracker

__all__ = [
    "__version__",
    "DEMO_CATALOG",
    "InvalidTrackingNumberError",
    "JsonFileKeyValueStore",
    "MapView",
    "MemoryKeyValueStore",
    "NotificationDispatcher",
    "NotificationError",
    "NotificationPermissionDeniedError",
    "NotificationUnsupportedError",
    "ParcelTrackConfigError",
    "ParcelTrackError",
    "ParcelTracker",
    "PermissionState",
    "PollingDriver",
    "PollingSession",
    "Route",
    "RouteCatalog",
    "ShipmentEvent",
    "StatusChangeEvent",
    "StatusChangeNotifier",
    "StatusKey",
    "StatusView",
    "TimelineEntry",
    "TimelineView",
    "TrackerConfig",
    "TrackingNotFoundError",
    "TrackingSession",
    "TrackingSnapshot",
    "TrackingStateError",
    "TrackingStateStore",
    "derive_state",
    "format_countdown",
]

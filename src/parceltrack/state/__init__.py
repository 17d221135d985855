"""State/store layer.

Persisted per-tracking-number state (start time, last status) and the
key-value backends it is stored in.
"""

from parceltrack.state.events import StatusChangeEvent
from parceltrack.state.storage import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from parceltrack.state.store import TrackingStateStore

__all__ = [
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "StatusChangeEvent",
    "TrackingStateStore",
]

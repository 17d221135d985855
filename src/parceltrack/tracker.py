"""High-level tracker tying catalog, state store, engine and notifier together."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from parceltrack.catalog import DEMO_CATALOG, RouteCatalog
from parceltrack.config import TrackerConfig
from parceltrack.engine import derive_state
from parceltrack.exceptions import ParcelTrackConfigError
from parceltrack.links import normalize_tracking_number, resolve_tracking_number
from parceltrack.models.session import TrackingSession
from parceltrack.models.view import TrackingSnapshot
from parceltrack.notifications import NotificationDispatcher, StatusChangeNotifier
from parceltrack.state.storage import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from parceltrack.state.store import TrackingStateStore
from parceltrack.views import build_snapshot

_logger = logging.getLogger(__name__)


def _now_ms() -> int:
    """Current epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


class ParcelTracker:
    """Simulated parcel tracker.

    Usage::

        tracker = ParcelTracker.from_config(TrackerConfig.from_env())
        snapshot = tracker.track("TM123456789")
        print(snapshot.status.status_text, snapshot.status.countdown)
    """

    def __init__(
        self,
        config: TrackerConfig | None = None,
        *,
        catalog: RouteCatalog | None = None,
        store: TrackingStateStore | None = None,
        dispatcher: NotificationDispatcher | None = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._config = config or TrackerConfig()
        self._catalog = catalog if catalog is not None else DEMO_CATALOG
        self._store = store or TrackingStateStore(
            key_prefix=self._config.key_prefix,
            max_backdate_minutes=self._config.max_backdate_minutes,
        )
        self._notifier = StatusChangeNotifier(
            self._store,
            dispatcher or NotificationDispatcher(system_enabled=self._config.notifications_enabled),
        )
        self._clock = clock

    @classmethod
    def from_config(
        cls,
        config: TrackerConfig,
        *,
        dispatcher: NotificationDispatcher | None = None,
        clock: Callable[[], int] = _now_ms,
    ) -> ParcelTracker:
        """Build a tracker with the storage and catalog named by *config*."""
        storage: KeyValueStore
        if config.storage_path:
            storage = JsonFileKeyValueStore(config.storage_path)
        else:
            storage = MemoryKeyValueStore()
        catalog = RouteCatalog.from_json_file(config.catalog_path) if config.catalog_path else DEMO_CATALOG
        if config.default_tracking_number not in catalog:
            raise ParcelTrackConfigError(
                f"Default tracking number {config.default_tracking_number!r} is not in the route catalog"
            )
        store = TrackingStateStore(
            storage,
            key_prefix=config.key_prefix,
            max_backdate_minutes=config.max_backdate_minutes,
        )
        return cls(config, catalog=catalog, store=store, dispatcher=dispatcher, clock=clock)

    @property
    def config(self) -> TrackerConfig:
        return self._config

    @property
    def catalog(self) -> RouteCatalog:
        return self._catalog

    @property
    def store(self) -> TrackingStateStore:
        return self._store

    @property
    def notifier(self) -> StatusChangeNotifier:
        return self._notifier

    def now_ms(self) -> int:
        return self._clock()

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------

    def lookup(self, user_input: str) -> str:
        """Normalize user input and check it against the catalog.

        Raises :class:`InvalidTrackingNumberError` for empty input and
        :class:`TrackingNotFoundError` for unknown numbers.
        """
        tracking_number = normalize_tracking_number(user_input)
        self._catalog.require_route(tracking_number)
        return tracking_number

    def resolve_link(self, param: str | None) -> str:
        """Tracking number to load for a shared link's ``tn`` parameter."""
        return resolve_tracking_number(param, self._catalog, self._config.default_tracking_number)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(self, tracking_number: str, now_ms: int | None = None) -> TrackingSession:
        """Derive the current session without touching the last-status record.

        The route is resolved before any state is read or created, so an
        unknown tracking number leaves storage untouched.
        """
        route = self._catalog.require_route(tracking_number)
        now = self._clock() if now_ms is None else now_ms
        start_time = self._store.get_or_create_start_time(tracking_number, now)
        return derive_state(route, start_time, now, tracking_number=tracking_number)

    def track(self, tracking_number: str, now_ms: int | None = None) -> TrackingSnapshot:
        """Evaluate, detect status transitions and project the result for rendering."""
        session = self.evaluate(tracking_number, now_ms)
        event = self._notifier.observe(session)
        _logger.debug(
            "%s evaluated: index=%d status=%s",
            tracking_number,
            session.current_index,
            session.status_key,
        )
        return build_snapshot(session, previous_status=event.previous if event is not None else None)

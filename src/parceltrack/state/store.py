"""Per-tracking-number persisted state.

Owns the storage key layout and the two pieces of state that survive
across sessions: the immutable simulated start time and the last-seen
status key used for transition detection.  The global theme preference
lives here as well since it shares the same storage.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable

from parceltrack._constants import (
    LAST_STATUS_KEY_PREFIX,
    MAX_BACKDATE_MINUTES,
    MS_PER_MINUTE,
    START_TIME_KEY_PREFIX,
    THEME_DARK,
    THEME_KEY,
    THEME_LIGHT,
)
from parceltrack.exceptions import TrackingStateError
from parceltrack.models.route import StatusKey
from parceltrack.state.storage import KeyValueStore, MemoryKeyValueStore

_logger = logging.getLogger(__name__)


class TrackingStateStore:
    """Typed accessors over a :class:`KeyValueStore`.

    Reads and writes are synchronous; each tracking number's records are
    independent, so no locking is performed.
    """

    def __init__(
        self,
        storage: KeyValueStore | None = None,
        *,
        key_prefix: str = "",
        max_backdate_minutes: int = MAX_BACKDATE_MINUTES,
        randint: Callable[[int, int], int] = random.randint,
    ) -> None:
        self._storage: KeyValueStore = storage if storage is not None else MemoryKeyValueStore()
        self._key_prefix = key_prefix
        self._max_backdate_minutes = max_backdate_minutes
        self._randint = randint

    @property
    def storage(self) -> KeyValueStore:
        return self._storage

    def start_time_key(self, tracking_number: str) -> str:
        return f"{self._key_prefix}{START_TIME_KEY_PREFIX}{tracking_number}"

    def last_status_key(self, tracking_number: str) -> str:
        return f"{self._key_prefix}{LAST_STATUS_KEY_PREFIX}{tracking_number}"

    @property
    def theme_key(self) -> str:
        return f"{self._key_prefix}{THEME_KEY}"

    # ------------------------------------------------------------------
    # Start time
    # ------------------------------------------------------------------

    def get_start_time(self, tracking_number: str) -> int | None:
        key = self.start_time_key(tracking_number)
        value = self._storage.get(key)
        if value is None:
            return None
        try:
            return int(value)
        except ValueError as exc:
            raise TrackingStateError(f"Stored start time {value!r} is not an integer", key=key) from exc

    def get_or_create_start_time(self, tracking_number: str, now_ms: int) -> int:
        """Return the persisted start time, creating a backdated one on first use.

        A new start time is ``now_ms`` minus a random whole number of minutes
        in ``[0, max_backdate_minutes)``.  Existing values are never
        overwritten.
        """
        existing = self.get_start_time(tracking_number)
        if existing is not None:
            return existing
        backdate = self._randint(0, self._max_backdate_minutes - 1)
        start_time = now_ms - backdate * MS_PER_MINUTE
        self._storage.set(self.start_time_key(tracking_number), str(start_time))
        _logger.debug("Created start time for %s backdated %d min", tracking_number, backdate)
        return start_time

    # ------------------------------------------------------------------
    # Last status
    # ------------------------------------------------------------------

    def get_last_status(self, tracking_number: str) -> StatusKey | None:
        key = self.last_status_key(tracking_number)
        value = self._storage.get(key)
        if value is None:
            return None
        try:
            return StatusKey(value)
        except ValueError as exc:
            raise TrackingStateError(f"Stored status {value!r} is not a known status key", key=key) from exc

    def set_last_status(self, tracking_number: str, status_key: StatusKey) -> None:
        self._storage.set(self.last_status_key(tracking_number), status_key.value)

    def check_transition(self, tracking_number: str, new_status_key: StatusKey) -> StatusKey | None:
        """Record *new_status_key* and return the previous key if it changed.

        The first observation of a tracking number is stored silently and
        returns ``None``.
        """
        previous = self.get_last_status(tracking_number)
        if previous == new_status_key:
            return None
        self.set_last_status(tracking_number, new_status_key)
        return previous

    # ------------------------------------------------------------------
    # Theme
    # ------------------------------------------------------------------

    def get_theme(self) -> str:
        return THEME_DARK if self._storage.get(self.theme_key) == THEME_DARK else THEME_LIGHT

    def set_theme(self, theme: str) -> None:
        if theme not in (THEME_DARK, THEME_LIGHT):
            raise ValueError(f"theme must be {THEME_DARK!r} or {THEME_LIGHT!r}, got {theme!r}")
        self._storage.set(self.theme_key, theme)

    def toggle_theme(self) -> str:
        theme = THEME_LIGHT if self.get_theme() == THEME_DARK else THEME_DARK
        self.set_theme(theme)
        return theme

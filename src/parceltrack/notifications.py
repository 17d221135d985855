"""Notification delivery and status transition detection.

Toasts are the always-available channel.  A system notification backend
is optional; when it is missing, unsupported or not permitted, delivery
degrades to toast-only.  Dispatch is fire-and-forget: nothing in here
raises into the polling loop.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from enum import StrEnum
from typing import Protocol

from parceltrack.exceptions import (
    InvalidTrackingNumberError,
    NotificationError,
    NotificationPermissionDeniedError,
    NotificationUnsupportedError,
)
from parceltrack.models.route import StatusKey
from parceltrack.models.session import TrackingSession
from parceltrack.state.events import StatusChangeEvent
from parceltrack.state.store import TrackingStateStore

_logger = logging.getLogger(__name__)


class PermissionState(StrEnum):
    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


class NotificationBackend(Protocol):
    """System notification capability of the hosting environment."""

    def permission(self) -> PermissionState: ...

    def request_permission(self) -> PermissionState: ...

    def show(self, title: str, body: str) -> None: ...


class UnsupportedNotificationBackend:
    """Backend for environments without system notifications."""

    def permission(self) -> PermissionState:
        raise NotificationUnsupportedError("Notifications not supported")

    def request_permission(self) -> PermissionState:
        raise NotificationUnsupportedError("Notifications not supported")

    def show(self, title: str, body: str) -> None:
        raise NotificationUnsupportedError("Notifications not supported")


def _log_toast(message: str) -> None:
    _logger.info("%s", message)


class NotificationDispatcher:
    """Deliver ``(title, body)`` pairs to the toast sink and system backend."""

    def __init__(
        self,
        toast: Callable[[str], None] | None = None,
        backend: NotificationBackend | None = None,
        *,
        system_enabled: bool = True,
    ) -> None:
        self._toast = toast or _log_toast
        self._backend: NotificationBackend = backend if backend is not None else UnsupportedNotificationBackend()
        self._system_enabled = system_enabled

    def toast(self, message: str) -> None:
        try:
            self._toast(message)
        except Exception:
            _logger.debug("Toast sink failed", exc_info=True)

    def enable_system_notifications(self) -> bool:
        """Ask the backend for permission and report the outcome as a toast."""
        try:
            state = self._backend.request_permission()
            if state != PermissionState.GRANTED:
                raise NotificationPermissionDeniedError("Notifications blocked")
        except NotificationUnsupportedError:
            self.toast("Notifications not supported")
            return False
        except NotificationPermissionDeniedError:
            self.toast("Notifications blocked")
            return False
        self.toast("Notifications enabled")
        return True

    def notify(self, title: str, body: str) -> None:
        self.toast(f"{title}: {body}")
        if not self._system_enabled:
            return
        try:
            if self._backend.permission() != PermissionState.GRANTED:
                return
            self._backend.show(title, body)
        except NotificationUnsupportedError:
            # Toast already delivered.
            return
        except NotificationError as exc:
            _logger.warning("System notification not delivered: %s", exc)
        except Exception:
            _logger.debug("System notification backend failed", exc_info=True)


class StatusChangeNotifier:
    """Compare derived status against the persisted last status."""

    def __init__(
        self,
        store: TrackingStateStore,
        dispatcher: NotificationDispatcher | None = None,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher or NotificationDispatcher()
        self._listeners: list[Callable[[StatusChangeEvent], None]] = []

    @property
    def dispatcher(self) -> NotificationDispatcher:
        return self._dispatcher

    def add_listener(self, listener: Callable[[StatusChangeEvent], None]) -> None:
        self._listeners.append(listener)

    def check_transition(self, tracking_number: str, new_status_key: StatusKey) -> StatusKey | None:
        """Return the previous status key when *new_status_key* differs from it.

        Never signals on the first observation of a tracking number.
        """
        return self._store.check_transition(tracking_number, new_status_key)

    def observe(self, session: TrackingSession) -> StatusChangeEvent | None:
        """Check *session* for a transition and notify when one happened."""
        if not session.tracking_number:
            raise InvalidTrackingNumberError("Cannot observe a session without a tracking number")
        previous = self.check_transition(session.tracking_number, session.status_key)
        if previous is None:
            return None

        event = StatusChangeEvent(
            tracking_number=session.tracking_number,
            previous=previous,
            current=session.status_key,
            title=session.current_event.title,
            observed_at=datetime.fromtimestamp(session.evaluated_at_ms / 1000, tz=UTC),
        )
        _logger.info("%s status changed %s -> %s", event.tracking_number, event.previous, event.current)
        self._dispatcher.notify(event.notification_title, event.notification_body)
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                _logger.debug("Status change listener failed", exc_info=True)
        return event

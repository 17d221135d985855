from __future__ import annotations

import logging
from dataclasses import dataclass, field

import pytest

from parceltrack.catalog import DEMO_CATALOG
from parceltrack.engine import derive_state
from parceltrack.exceptions import InvalidTrackingNumberError, NotificationPermissionDeniedError
from parceltrack.models.route import StatusKey
from parceltrack.notifications import NotificationDispatcher, PermissionState, StatusChangeNotifier
from parceltrack.state.events import StatusChangeEvent
from parceltrack.state.store import TrackingStateStore

MINUTE = 60_000
T = 1_700_000_000_000


@dataclass
class FakeBackend:
    state: PermissionState = PermissionState.DEFAULT
    grant_on_request: bool = True
    shown: list[tuple[str, str]] = field(default_factory=list)
    fail_show: bool = False

    def permission(self) -> PermissionState:
        return self.state

    def request_permission(self) -> PermissionState:
        self.state = PermissionState.GRANTED if self.grant_on_request else PermissionState.DENIED
        return self.state

    def show(self, title: str, body: str) -> None:
        if self.fail_show:
            raise NotificationPermissionDeniedError("revoked")
        self.shown.append((title, body))


class TestNotificationDispatcher:
    def test_granted_backend_receives_notification(self) -> None:
        toasts: list[str] = []
        backend = FakeBackend(state=PermissionState.GRANTED)
        dispatcher = NotificationDispatcher(toast=toasts.append, backend=backend)

        dispatcher.notify("Status changed", "TM1: Delivered")

        assert toasts == ["Status changed: TM1: Delivered"]
        assert backend.shown == [("Status changed", "TM1: Delivered")]

    def test_without_permission_only_toasts(self) -> None:
        toasts: list[str] = []
        backend = FakeBackend(state=PermissionState.DENIED)
        NotificationDispatcher(toast=toasts.append, backend=backend).notify("a", "b")
        assert toasts == ["a: b"]
        assert backend.shown == []

    def test_unsupported_environment_degrades_to_toast(self) -> None:
        toasts: list[str] = []
        NotificationDispatcher(toast=toasts.append).notify("a", "b")
        assert toasts == ["a: b"]

    def test_system_disabled_skips_backend(self) -> None:
        backend = FakeBackend(state=PermissionState.GRANTED)
        NotificationDispatcher(toast=lambda _m: None, backend=backend, system_enabled=False).notify("a", "b")
        assert backend.shown == []

    def test_backend_failure_is_logged_not_raised(self, caplog: pytest.LogCaptureFixture) -> None:
        backend = FakeBackend(state=PermissionState.GRANTED, fail_show=True)
        with caplog.at_level(logging.WARNING, logger="parceltrack.notifications"):
            NotificationDispatcher(toast=lambda _m: None, backend=backend).notify("a", "b")
        assert "not delivered" in caplog.text

    def test_failing_toast_sink_is_swallowed(self) -> None:
        def _boom(_message: str) -> None:
            raise RuntimeError("display gone")

        NotificationDispatcher(toast=_boom).notify("a", "b")

    def test_enable_granted(self) -> None:
        toasts: list[str] = []
        dispatcher = NotificationDispatcher(toast=toasts.append, backend=FakeBackend())
        assert dispatcher.enable_system_notifications() is True
        assert toasts == ["Notifications enabled"]

    def test_enable_denied(self) -> None:
        toasts: list[str] = []
        dispatcher = NotificationDispatcher(toast=toasts.append, backend=FakeBackend(grant_on_request=False))
        assert dispatcher.enable_system_notifications() is False
        assert toasts == ["Notifications blocked"]

    def test_enable_unsupported(self) -> None:
        toasts: list[str] = []
        assert NotificationDispatcher(toast=toasts.append).enable_system_notifications() is False
        assert toasts == ["Notifications not supported"]


class TestStatusChangeNotifier:
    def _notifier(self) -> tuple[StatusChangeNotifier, list[str]]:
        toasts: list[str] = []
        notifier = StatusChangeNotifier(TrackingStateStore(), NotificationDispatcher(toast=toasts.append))
        return notifier, toasts

    def test_first_observation_does_not_notify(self) -> None:
        notifier, toasts = self._notifier()
        route = DEMO_CATALOG.require_route("TM123456789")
        session = derive_state(route, T, T + 100 * MINUTE, tracking_number="TM123456789")

        assert notifier.observe(session) is None
        assert toasts == []

    def test_transition_notifies_and_emits_event(self) -> None:
        notifier, toasts = self._notifier()
        events: list[StatusChangeEvent] = []
        notifier.add_listener(events.append)
        route = DEMO_CATALOG.require_route("TM123456789")

        notifier.observe(derive_state(route, T, T + 100 * MINUTE, tracking_number="TM123456789"))
        notifier.observe(derive_state(route, T, T + 200 * MINUTE, tracking_number="TM123456789"))
        event = notifier.observe(derive_state(route, T, T + 250 * MINUTE, tracking_number="TM123456789"))

        assert event is not None
        assert event.previous == StatusKey.PICKED
        assert event.current == StatusKey.IN_TRANSIT
        assert event.observed_at.timestamp() * 1000 == T + 250 * MINUTE
        assert events == [event]
        assert toasts == ["Status changed: TM123456789: In transit"]

    def test_failing_listener_does_not_break_observe(self) -> None:
        notifier, toasts = self._notifier()

        def _boom(_event: StatusChangeEvent) -> None:
            raise RuntimeError("listener bug")

        notifier.add_listener(_boom)
        notifier.check_transition("TM1", StatusKey.CREATED)
        route = DEMO_CATALOG.require_route("TM123456789")
        event = notifier.observe(derive_state(route, T, T + 100 * MINUTE, tracking_number="TM1"))
        assert event is not None
        assert len(toasts) == 1


def test_status_change_event_rejects_blank_tracking_number() -> None:
    with pytest.raises(ValueError):
        StatusChangeEvent(tracking_number="  ", previous=StatusKey.CREATED, current=StatusKey.PICKED, title="Picked up")


def test_observe_rejects_session_without_tracking_number() -> None:
    store = TrackingStateStore()
    notifier = StatusChangeNotifier(store, NotificationDispatcher(toast=lambda _m: None))
    route = DEMO_CATALOG.require_route("TM123456789")

    with pytest.raises(InvalidTrackingNumberError):
        notifier.observe(derive_state(route, T, T + 100 * MINUTE))

    assert store.get_last_status("") is None

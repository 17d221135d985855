"""Tests for state derivation and countdown formatting."""

from __future__ import annotations

import pytest

from parceltrack.catalog import DEMO_CATALOG
from parceltrack.engine import (
    current_event_index,
    derive_state,
    elapsed_minutes,
    eta_ms,
    event_timestamp_ms,
    format_countdown,
)
from parceltrack.models.route import Route, ShipmentEvent, StatusKey

MINUTE = 60_000
T = 1_700_000_000_000

# Offsets [0, 60, 240, 360, 1320, 1440]
ROUTE = DEMO_CATALOG.require_route("TM123456789")


def _event(offset: int, status: StatusKey = StatusKey.IN_TRANSIT) -> ShipmentEvent:
    return ShipmentEvent(
        title=f"t+{offset}",
        offset_minutes=offset,
        latitude=0.0,
        longitude=0.0,
        location="Nowhere",
        status_key=status,
    )


# ------------------------------------------------------------------
# derive_state
# ------------------------------------------------------------------


class TestDeriveState:
    def test_start_is_first_event(self) -> None:
        session = derive_state(ROUTE, T, T)
        assert session.current_index == 0
        assert session.current_event.status_key == StatusKey.CREATED

    def test_picked_up_after_100_minutes(self) -> None:
        session = derive_state(ROUTE, T, T + 100 * MINUTE)
        assert session.current_index == 1
        assert session.current_event.title == "Picked up"

    def test_last_event_at_final_offset(self) -> None:
        now = T + 1440 * MINUTE
        session = derive_state(ROUTE, T, now)
        assert session.current_index == 5
        assert session.is_complete
        assert format_countdown(session.eta_ms, now) == "Arrived"

    def test_one_minute_before_arrival(self) -> None:
        now = T + 1439 * MINUTE
        session = derive_state(ROUTE, T, now)
        assert session.current_index == 4
        countdown = format_countdown(session.eta_ms, now)
        assert countdown == "1m 0s"
        assert "d" not in countdown

    def test_eta_is_start_plus_last_offset(self) -> None:
        session = derive_state(ROUTE, T, T + 5 * MINUTE)
        assert session.eta_ms == T + 1440 * MINUTE
        assert eta_ms(ROUTE, T) == session.eta_ms

    def test_now_before_start_clamps_to_first_event(self) -> None:
        session = derive_state(ROUTE, T, T - 30 * MINUTE)
        assert session.current_index == 0

    def test_partial_minute_is_floored(self) -> None:
        session = derive_state(ROUTE, T, T + 60 * MINUTE - 1)
        assert session.current_index == 0

    def test_session_carries_context(self) -> None:
        now = T + 250 * MINUTE
        session = derive_state(ROUTE, T, now, tracking_number="TM123456789")
        assert session.tracking_number == "TM123456789"
        assert session.carrier == "MockExpress"
        assert session.events == ROUTE.events
        assert session.start_time_ms == T
        assert session.evaluated_at_ms == now
        assert session.status_key == StatusKey.IN_TRANSIT

    @pytest.mark.parametrize("tracking_number", list(DEMO_CATALOG))
    def test_every_route_starts_at_zero_and_finishes_at_last(self, tracking_number: str) -> None:
        route = DEMO_CATALOG.require_route(tracking_number)
        assert derive_state(route, T, T).current_index == 0
        end = T + route.total_minutes * MINUTE
        for now in (end, end + 10 * MINUTE):
            assert derive_state(route, T, now).current_index == len(route.events) - 1
            assert format_countdown(eta_ms(route, T), now) == "Arrived"

    @pytest.mark.parametrize("tracking_number", list(DEMO_CATALOG))
    def test_index_is_monotonic(self, tracking_number: str) -> None:
        route = DEMO_CATALOG.require_route(tracking_number)
        previous = 0
        for minute in range(-10, route.total_minutes + 30, 7):
            index = derive_state(route, T, T + minute * MINUTE).current_index
            assert index >= previous
            previous = index


class TestCurrentEventIndex:
    def test_ties_resolve_to_latest_event(self) -> None:
        events = (_event(0), _event(10), _event(10))
        assert current_event_index(events, 10) == 2

    def test_last_qualifying_index_not_first(self) -> None:
        events = (_event(0), _event(100), _event(50))
        assert current_event_index(events, 60) == 2

    def test_nothing_qualifies_defaults_to_zero(self) -> None:
        events = (_event(30), _event(60))
        assert current_event_index(events, 5) == 0


def test_elapsed_minutes_clamped() -> None:
    assert elapsed_minutes(T, T - MINUTE) == 0
    assert elapsed_minutes(T, T + 90 * MINUTE + 59_999) == 90


def test_event_timestamp() -> None:
    assert event_timestamp_ms(T, ROUTE.events[3]) == T + 360 * MINUTE


def test_single_event_route() -> None:
    route = Route(carrier="Solo", events=(_event(0, StatusKey.DELIVERED),))
    session = derive_state(route, T, T + MINUTE)
    assert session.current_index == 0
    assert session.eta_ms == T


# ------------------------------------------------------------------
# format_countdown
# ------------------------------------------------------------------


class TestFormatCountdown:
    def test_zero_is_arrived(self) -> None:
        assert format_countdown(T, T) == "Arrived"

    def test_negative_is_arrived(self) -> None:
        assert format_countdown(T, T + 5_000) == "Arrived"

    def test_days_hours_minutes_seconds(self) -> None:
        remaining = (86400 + 5 * 60 + 3) * 1000
        assert format_countdown(T + remaining, T) == "1d 0h 5m 3s"

    def test_hours_without_days(self) -> None:
        assert format_countdown(T + 2 * 3600 * 1000, T) == "2h 0m 0s"

    def test_minutes_and_seconds_always_shown(self) -> None:
        assert format_countdown(T + 59_000, T) == "0m 59s"

    def test_sub_second_remaining(self) -> None:
        assert format_countdown(T + 999, T) == "0m 0s"

    def test_decreases_between_calls(self) -> None:
        eta = T + 10 * MINUTE
        assert format_countdown(eta, T) == "10m 0s"
        assert format_countdown(eta, T + 1_000) == "9m 59s"

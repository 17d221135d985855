"""Pure projections from a tracking session to view models."""

from __future__ import annotations

from parceltrack.engine import event_timestamp_ms, format_countdown
from parceltrack.models.route import StatusKey
from parceltrack.models.session import TrackingSession
from parceltrack.models.view import MapView, StatusView, TimelineEntry, TimelineView, TrackingSnapshot

_STATUS_LABELS: dict[StatusKey, str] = {
    StatusKey.DELIVERED: "Delivered",
    StatusKey.OUT_FOR_DELIVERY: "Out for delivery",
    StatusKey.IN_TRANSIT: "In transit",
}


def status_label(status_key: StatusKey) -> str:
    """Pill label shown next to a timeline entry."""
    return _STATUS_LABELS.get(status_key, "Info")


def build_map_view(session: TrackingSession) -> MapView:
    path = tuple(event.coordinates for event in session.events)
    return MapView(
        path=path,
        current_index=session.current_index,
        position=path[session.current_index],
    )


def build_timeline_view(session: TrackingSession) -> TimelineView:
    entries = tuple(
        TimelineEntry(
            title=event.title,
            location=event.location,
            latitude=event.latitude,
            longitude=event.longitude,
            status_key=event.status_key,
            status_label=status_label(event.status_key),
            timestamp_ms=event_timestamp_ms(session.start_time_ms, event),
            is_current=i == session.current_index,
        )
        for i, event in enumerate(session.events)
    )
    return TimelineView(carrier=session.carrier, current_index=session.current_index, entries=entries)


def build_status_view(session: TrackingSession, now_ms: int | None = None) -> StatusView:
    now = session.evaluated_at_ms if now_ms is None else now_ms
    return StatusView(
        tracking_number=session.tracking_number,
        carrier=session.carrier,
        status_key=session.status_key,
        status_text=session.current_event.title,
        last_update_ms=session.evaluated_at_ms,
        countdown=format_countdown(session.eta_ms, now),
        eta_ms=session.eta_ms,
    )


def build_snapshot(session: TrackingSession, *, previous_status: StatusKey | None = None) -> TrackingSnapshot:
    return TrackingSnapshot(
        status=build_status_view(session),
        map=build_map_view(session),
        timeline=build_timeline_view(session),
        previous_status=previous_status,
    )

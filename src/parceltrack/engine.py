"""Tracking-state derivation.

Pure functions mapping ``(route, start time, now)`` to the current event,
ETA and countdown.  All timestamps are epoch milliseconds.
"""

from __future__ import annotations

from parceltrack._constants import ARRIVED, MS_PER_MINUTE, MS_PER_SECOND
from parceltrack.models.route import Route, ShipmentEvent
from parceltrack.models.session import TrackingSession


def elapsed_minutes(start_time_ms: int, now_ms: int) -> int:
    """Whole minutes since *start_time_ms*, clamped at zero."""
    return max(0, (now_ms - start_time_ms) // MS_PER_MINUTE)


def current_event_index(events: tuple[ShipmentEvent, ...], minutes: int) -> int:
    """Index of the last event whose offset has been reached.

    Scans every event so that ties and out-of-order offsets resolve to the
    latest qualifying index.  Returns ``0`` when nothing qualifies.
    """
    index = 0
    for i, event in enumerate(events):
        if minutes >= event.offset_minutes:
            index = i
    return index


def event_timestamp_ms(start_time_ms: int, event: ShipmentEvent) -> int:
    return start_time_ms + event.offset_minutes * MS_PER_MINUTE


def eta_ms(route: Route, start_time_ms: int) -> int:
    """Absolute time of the final route event."""
    return event_timestamp_ms(start_time_ms, route.last_event)


def derive_state(
    route: Route,
    start_time_ms: int,
    now_ms: int,
    *,
    tracking_number: str = "",
) -> TrackingSession:
    """Evaluate *route* at *now_ms* for a parcel that started at *start_time_ms*."""
    index = current_event_index(route.events, elapsed_minutes(start_time_ms, now_ms))
    return TrackingSession(
        tracking_number=tracking_number,
        carrier=route.carrier,
        events=route.events,
        current_index=index,
        current_event=route.events[index],
        start_time_ms=start_time_ms,
        eta_ms=eta_ms(route, start_time_ms),
        evaluated_at_ms=now_ms,
    )


def format_countdown(eta: int, now_ms: int) -> str:
    """Render the time left until *eta*.

    Returns ``"Arrived"`` once the ETA has passed.  Otherwise days are only
    shown when non-zero, hours when days or hours are non-zero, and minutes
    and seconds always, e.g. ``"1d 0h 5m 3s"`` or ``"0m 59s"``.
    """
    remaining_ms = eta - now_ms
    if remaining_ms <= 0:
        return ARRIVED
    total_seconds = remaining_ms // MS_PER_SECOND
    days, rem = divmod(total_seconds, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)

    parts: list[str] = []
    if days:
        parts.append(f"{days}d")
    if hours or days:
        parts.append(f"{hours}h")
    parts.append(f"{minutes}m")
    parts.append(f"{seconds}s")
    return " ".join(parts)

"""View models consumed by rendering collaborators.

These carry no behaviour; they are produced by :mod:`parceltrack.views`
from a :class:`~parceltrack.models.session.TrackingSession`.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from parceltrack.models.route import StatusKey


class MapView(BaseModel):
    """Polyline path plus the index/position of the parcel marker."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: tuple[tuple[float, float], ...]
    current_index: int
    position: tuple[float, float]


class TimelineEntry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str
    location: str
    latitude: float
    longitude: float
    status_key: StatusKey
    status_label: str
    timestamp_ms: int
    is_current: bool


class TimelineView(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    carrier: str
    current_index: int
    entries: tuple[TimelineEntry, ...]


class StatusView(BaseModel):
    """Headline status block: current event, carrier and ETA countdown."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    tracking_number: str
    carrier: str
    status_key: StatusKey
    status_text: str
    last_update_ms: int
    countdown: str
    eta_ms: int


class TrackingSnapshot(BaseModel):
    """Everything a front end needs to render one evaluation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: StatusView
    map: MapView
    timeline: TimelineView
    previous_status: StatusKey | None = None

    @property
    def status_changed(self) -> bool:
        return self.previous_status is not None

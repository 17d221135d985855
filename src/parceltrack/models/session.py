"""Derived tracking session model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from parceltrack.models.route import ShipmentEvent, StatusKey


class TrackingSession(BaseModel):
    """Result of evaluating a route at a point in time.

    Never persisted; recomputed on every query.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    tracking_number: str = ""
    carrier: str
    events: tuple[ShipmentEvent, ...]
    current_index: int = Field(ge=0)
    current_event: ShipmentEvent
    start_time_ms: int
    eta_ms: int
    evaluated_at_ms: int

    @model_validator(mode="after")
    def _check_index(self) -> TrackingSession:
        if self.current_index >= len(self.events):
            raise ValueError(f"current_index {self.current_index} out of range for {len(self.events)} events")
        return self

    @property
    def status_key(self) -> StatusKey:
        return self.current_event.status_key

    @property
    def is_complete(self) -> bool:
        return self.current_index == len(self.events) - 1

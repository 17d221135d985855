"""Route and shipment event models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class StatusKey(StrEnum):
    """Shipment phase attached to each route event."""

    CREATED = "created"
    PICKED = "picked"
    IN_TRANSIT = "in_transit"
    FACILITY = "facility"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"


class ShipmentEvent(BaseModel):
    """A single scheduled event on a route.

    Parameters
    ----------
    title : str
        Human readable label (e.g. ``"Picked up"``).
    offset_minutes : int
        Minutes after the route start at which the event becomes current.
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    location : str
        Place name shown next to the event.
    status_key : StatusKey
        Shipment phase.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    title: str
    offset_minutes: int = Field(
        ge=0,
        validation_alias=AliasChoices("offset_minutes", "offsetMinutes", "tsOffsetMin"),
    )
    latitude: float = Field(validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(validation_alias=AliasChoices("longitude", "lng", "lon"))
    location: str = ""
    status_key: StatusKey = Field(validation_alias=AliasChoices("status_key", "statusKey"))

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


class Route(BaseModel):
    """Carrier plus its ordered, non-empty sequence of events."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    carrier: str
    events: tuple[ShipmentEvent, ...] = Field(validation_alias=AliasChoices("events", "route"))

    @field_validator("events")
    @classmethod
    def _require_events(cls, value: tuple[ShipmentEvent, ...]) -> tuple[ShipmentEvent, ...]:
        if not value:
            raise ValueError("route must contain at least one event")
        return value

    @property
    def last_event(self) -> ShipmentEvent:
        return self.events[-1]

    @property
    def total_minutes(self) -> int:
        """Offset of the final event, i.e. the transit duration."""
        return self.last_event.offset_minutes

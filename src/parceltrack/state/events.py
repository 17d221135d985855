"""Status transition events raised by the notifier."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from parceltrack.models.route import StatusKey


class StatusChangeEvent(BaseModel):
    """A tracking number moved from one status key to another."""

    model_config = ConfigDict(frozen=True)

    tracking_number: str = Field(..., description="Tracking number")
    previous: StatusKey
    current: StatusKey
    title: str = Field(..., description="Title of the newly current route event")
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("tracking_number")
    @classmethod
    def _normalize_tracking_number(cls, value: str) -> str:
        tracking_number = value.strip()
        if not tracking_number:
            raise ValueError("tracking_number must be non-empty")
        return tracking_number

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def notification_title(self) -> str:
        return "Status changed"

    @property
    def notification_body(self) -> str:
        return f"{self.tracking_number}: {self.title}"

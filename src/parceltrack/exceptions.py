"""Custom exception hierarchy for parceltrack."""

from __future__ import annotations


class ParcelTrackError(Exception):
    """Base exception for all parceltrack errors."""


class ParcelTrackConfigError(ParcelTrackError):
    """Invalid or missing configuration."""


class InvalidTrackingNumberError(ParcelTrackError):
    """User input could not be turned into a tracking number (e.g. empty)."""


class TrackingNotFoundError(ParcelTrackError):
    """Tracking number is not present in the route catalog.

    Raised before any derivation happens, so no persisted state is
    created for the unknown number.
    """

    def __init__(self, message: str, *, tracking_number: str = "") -> None:
        self.tracking_number = tracking_number
        super().__init__(message)


class TrackingStateError(ParcelTrackError):
    """A persisted per-tracking value could not be interpreted."""

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class NotificationError(ParcelTrackError):
    """System notification delivery is not possible."""


class NotificationUnsupportedError(NotificationError):
    """The hosting environment has no system notification capability."""


class NotificationPermissionDeniedError(NotificationError):
    """The user declined system notifications."""

"""Tracker configuration for parceltrack."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from parceltrack._constants import DEFAULT_POLL_INTERVAL, DEFAULT_TRACKING_NUMBER, MAX_BACKDATE_MINUTES
from parceltrack.exceptions import ParcelTrackConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[float] | type[int]) -> float | int:
    try:
        return cast(value)
    except ValueError as exc:
        raise ParcelTrackConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class TrackerConfig:
    """Tracker configuration.

    Parameters
    ----------
    poll_interval : float
        Seconds between re-evaluations of the active tracking number.
    default_tracking_number : str
        Tracking number used when a shared link carries no (or an unknown)
        ``tn`` parameter.
    max_backdate_minutes : int
        Fresh start times are backdated by ``randint(0, max_backdate_minutes - 1)``
        minutes so a newly tracked parcel already looks in progress.
    storage_path : str or None
        JSON file backing the key-value store.  ``None`` keeps state in memory
        for the lifetime of the process.
    key_prefix : str
        Prefix prepended to every storage key.
    catalog_path : str or None
        JSON file whose routes replace the demo catalog.  It must contain
        ``default_tracking_number``.  ``None`` uses the demo catalog.
    notifications_enabled : bool
        Forward status changes to the system notification backend (toasts
        are always emitted).
    """

    poll_interval: float = DEFAULT_POLL_INTERVAL
    default_tracking_number: str = DEFAULT_TRACKING_NUMBER
    max_backdate_minutes: int = MAX_BACKDATE_MINUTES
    storage_path: str | None = None
    key_prefix: str = ""
    catalog_path: str | None = None
    notifications_enabled: bool = True

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise ParcelTrackConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.max_backdate_minutes < 1:
            raise ParcelTrackConfigError(f"max_backdate_minutes must be at least 1, got {self.max_backdate_minutes}")
        if not self.default_tracking_number.strip():
            raise ParcelTrackConfigError("default_tracking_number must be non-empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> TrackerConfig:
        """Create configuration from ``PARCELTRACK_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_STR_MAP = {
            "PARCELTRACK_DEFAULT_TRACKING_NUMBER": "default_tracking_number",
            "PARCELTRACK_STORAGE_PATH": "storage_path",
            "PARCELTRACK_KEY_PREFIX": "key_prefix",
            "PARCELTRACK_CATALOG_PATH": "catalog_path",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        interval_env = env.get("PARCELTRACK_POLL_INTERVAL")
        if interval_env is not None:
            config_kwargs["poll_interval"] = _env_number("PARCELTRACK_POLL_INTERVAL", interval_env, float)

        backdate_env = env.get("PARCELTRACK_MAX_BACKDATE_MINUTES")
        if backdate_env is not None:
            config_kwargs["max_backdate_minutes"] = _env_number("PARCELTRACK_MAX_BACKDATE_MINUTES", backdate_env, int)

        config_kwargs["notifications_enabled"] = _env_bool(env.get("PARCELTRACK_NOTIFICATIONS_ENABLED"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)

from __future__ import annotations

import pytest

from parceltrack.config import TrackerConfig
from parceltrack.exceptions import ParcelTrackConfigError


def test_defaults() -> None:
    config = TrackerConfig()
    assert config.poll_interval == 10.0
    assert config.default_tracking_number == "TM123456789"
    assert config.max_backdate_minutes == 240
    assert config.storage_path is None
    assert config.key_prefix == ""
    assert config.notifications_enabled is True


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PARCELTRACK_POLL_INTERVAL", "2.5")
    monkeypatch.setenv("PARCELTRACK_MAX_BACKDATE_MINUTES", "30")
    monkeypatch.setenv("PARCELTRACK_STORAGE_PATH", "/tmp/state.json")
    monkeypatch.setenv("PARCELTRACK_KEY_PREFIX", "pkg_")
    monkeypatch.setenv("PARCELTRACK_NOTIFICATIONS_ENABLED", "off")

    config = TrackerConfig.from_env()

    assert config.poll_interval == 2.5
    assert config.max_backdate_minutes == 30
    assert config.storage_path == "/tmp/state.json"
    assert config.key_prefix == "pkg_"
    assert config.notifications_enabled is False


def test_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PARCELTRACK_DEFAULT_TRACKING_NUMBER", "TM987654321")
    config = TrackerConfig.from_env(default_tracking_number="TM555000111")
    assert config.default_tracking_number == "TM555000111"


def test_bad_number_in_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PARCELTRACK_POLL_INTERVAL", "often")
    with pytest.raises(ParcelTrackConfigError):
        TrackerConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"poll_interval": 0},
        {"max_backdate_minutes": 0},
        {"default_tracking_number": " "},
    ],
)
def test_invalid_values(kwargs: dict[str, object]) -> None:
    with pytest.raises(ParcelTrackConfigError):
        TrackerConfig(**kwargs)  # type: ignore[arg-type]

from __future__ import annotations

import pytest

from parceltrack.catalog import DEMO_CATALOG
from parceltrack.exceptions import InvalidTrackingNumberError
from parceltrack.links import (
    build_share_url,
    normalize_tracking_number,
    resolve_tracking_number,
    tracking_number_from_url,
)


def test_normalize() -> None:
    assert normalize_tracking_number(" tm123 ") == "TM123"


def test_normalize_empty() -> None:
    with pytest.raises(InvalidTrackingNumberError, match="Enter a tracking number"):
        normalize_tracking_number("")


def test_build_share_url_sets_param() -> None:
    assert build_share_url("https://example.com/track", "TM1") == "https://example.com/track?tn=TM1"


def test_build_share_url_replaces_existing_and_keeps_others() -> None:
    url = build_share_url("https://example.com/?lang=en&tn=OLD", "TM2")
    assert tracking_number_from_url(url) == "TM2"
    assert "lang=en" in url
    assert "OLD" not in url


def test_tracking_number_from_url_absent() -> None:
    assert tracking_number_from_url("https://example.com/") is None


def test_round_trip_through_resolve() -> None:
    url = build_share_url("https://example.com/", "TM555000111")
    assert resolve_tracking_number(tracking_number_from_url(url), DEMO_CATALOG) == "TM555000111"


def test_resolve_custom_default() -> None:
    assert resolve_tracking_number("ZZ000", DEMO_CATALOG, default="TM987654321") == "TM987654321"

"""Tracking-number input handling and shareable links."""

from __future__ import annotations

from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from parceltrack._constants import DEFAULT_TRACKING_NUMBER, SHARE_QUERY_PARAM
from parceltrack.catalog import RouteCatalog
from parceltrack.exceptions import InvalidTrackingNumberError


def normalize_tracking_number(value: str) -> str:
    """Strip and uppercase user input.

    Raises :class:`InvalidTrackingNumberError` for empty input.
    """
    tracking_number = value.strip().upper()
    if not tracking_number:
        raise InvalidTrackingNumberError("Enter a tracking number")
    return tracking_number


def build_share_url(base_url: str, tracking_number: str) -> str:
    """Return *base_url* with the ``tn`` query parameter set to *tracking_number*.

    Other query parameters are preserved.
    """
    parts = urlsplit(base_url)
    query = parse_qs(parts.query, keep_blank_values=True)
    query[SHARE_QUERY_PARAM] = [tracking_number]
    return urlunsplit(parts._replace(query=urlencode(query, doseq=True)))


def tracking_number_from_url(url: str) -> str | None:
    values = parse_qs(urlsplit(url).query).get(SHARE_QUERY_PARAM)
    return values[0] if values else None


def resolve_tracking_number(
    param: str | None,
    catalog: RouteCatalog,
    default: str = DEFAULT_TRACKING_NUMBER,
) -> str:
    """Pick the tracking number to load from a link parameter.

    Absent or unknown parameters fall back to *default*.
    """
    if param:
        candidate = param.strip().upper()
        if candidate in catalog:
            return candidate
    return default

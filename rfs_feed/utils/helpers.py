"""Shared helper functions used across multiple activity modules.

Centralises feed date parsing (every feed publishes naive local times)
and incident identifier extraction.
"""

from __future__ import annotations

import re
from datetime import datetime
from zoneinfo import ZoneInfo

from rfs_feed.core.constants import DEFAULT_FEED_TIMEZONE

_TRAILING_ID = re.compile(r"(\d+)\D*$")


def parse_local_datetime(
    text: str,
    fmt: str,
    *,
    timezone: str = DEFAULT_FEED_TIMEZONE,
) -> datetime:
    """Parse a naive feed timestamp as local time in ``timezone``.

    Args:
        text: Timestamp text, e.g. ``"3/01/2018 5:20:00 AM"``.
        fmt: ``strptime`` format of ``text``.
        timezone: IANA timezone the feed publishes in.

    Returns:
        A timezone-aware ``datetime`` carrying the correct daylight
        saving offset for that date.

    Raises:
        ValueError: If ``text`` does not match ``fmt``.
    """
    naive = datetime.strptime(text.strip(), fmt)
    return naive.replace(tzinfo=ZoneInfo(timezone))


def to_iso_datetime(text: str, fmt: str, *, timezone: str = DEFAULT_FEED_TIMEZONE) -> str:
    """Return a feed timestamp as ISO 8601 with offset (``2018-01-03T05:20:00+11:00``)."""
    return parse_local_datetime(text, fmt, timezone=timezone).isoformat()


def to_iso_date(text: str, fmt: str, *, timezone: str = DEFAULT_FEED_TIMEZONE) -> str:
    """Return a feed date as an ISO 8601 calendar date (``2020-10-18``)."""
    return parse_local_datetime(text, fmt, timezone=timezone).date().isoformat()


def extract_incident_id(reference: object) -> str | None:
    """Extract the numeric incident identifier from an opaque reference.

    The feed's ``guid`` is a URL ending in the incident number
    (``https://incidents.rfs.nsw.gov.au/api/v1/incidents/370551``).

    Returns:
        The trailing digit run, or ``None`` if there is none.
    """
    if not isinstance(reference, str):
        return None
    match = _TRAILING_ID.search(reference.strip())
    return match.group(1) if match else None

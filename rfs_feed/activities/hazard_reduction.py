"""Hazard reduction feed conversion activity.

The planned-burns feed is tabular JSON: each record carries its polygons
as ``"lat;lon|lat;lon|..."`` strings and its dates as ``"18/10/2020"``.
``hazard_reduction_to_geojson`` maps it field by field onto a GeoJSON
FeatureCollection.  Unlike the incident cleaner this is a strict
mapping: a record missing a field it relies on raises
``HazardReductionError``.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from rfs_feed.core.constants import DEFAULT_FEED_TIMEZONE, HAZARD_REDUCTION_DATE_FORMAT
from rfs_feed.core.exceptions import ValidationError
from rfs_feed.models.contracts import (
    FeatureCollectionDict,
    FeatureDict,
    HazardReductionPayload,
    HazardReductionRecord,
)
from rfs_feed.utils.helpers import to_iso_date

logger = logging.getLogger("rfs_feed.activities.hazard_reduction")

_TRAILING_TITLE = re.compile(r"\s*HAZARD REDUCTION\s*$", re.IGNORECASE)
_TRAILING_UNIT = re.compile(r"\s*ha\s*$", re.IGNORECASE)


class HazardReductionError(ValidationError):
    """A hazard reduction record cannot be converted."""

    default_stage = "hazard_reduction"
    default_code = "HAZARD_REDUCTION_INVALID"


def hazard_reduction_to_geojson(
    payload: HazardReductionPayload,
    *,
    timezone: str = DEFAULT_FEED_TIMEZONE,
) -> FeatureCollectionDict:
    """Convert the hazard reduction feed document to a FeatureCollection.

    Args:
        payload: Feed document with a ``results`` list.
        timezone: IANA timezone the feed's dates are local to.

    Raises:
        HazardReductionError: If ``results`` is missing or a record
            lacks a required field or holds a non-numeric coordinate.
    """
    results = payload.get("results")
    if not isinstance(results, list):
        msg = "Hazard reduction payload has no 'results' list"
        raise HazardReductionError(msg)

    features = [_to_feature(record, timezone) for record in results]
    logger.info("Converted hazard reduction feed | features=%d", len(features))
    return {"type": "FeatureCollection", "features": features}


def _to_feature(record: HazardReductionRecord, timezone: str) -> FeatureDict:
    reference = str(record.get("guarReference", ""))
    try:
        polygons = [[parse_polygon(entry["polygon"])] for entry in record["polygons"]]
        return {
            "type": "Feature",
            "id": record["guarReference"],
            "properties": {
                "leadAgency": record.get("leadAgency"),
                "supportingAgencies": record.get("supportingAgencies"),
                "size": clean_size(record.get("size")),
                "title": clean_title(record["location"]),
                "tenure": record.get("tenure"),
                "startDate": clean_date(record.get("startDate"), timezone=timezone),
                "endDate": clean_date(record.get("endDate"), timezone=timezone),
            },
            "geometry": {"type": record["geometryType"], "coordinates": polygons},
        }
    except (KeyError, TypeError, ValueError) as exc:
        msg = f"Hazard reduction record {reference or '?'} is malformed: {exc!r}"
        raise HazardReductionError(msg, correlation_id=reference) from exc


def parse_polygon(text: str) -> list[list[float]]:
    """Parse ``"lat;lon|lat;lon"`` into a ``[[lon, lat], ...]`` ring.

    Tokens shorter than two characters and points left empty are dropped.

    Raises:
        ValueError: If a kept token is not a number.
    """
    ring = []
    for pair in text.split("|"):
        point = [float(token) for token in pair.split(";") if len(token) >= 2]
        point.reverse()
        if point:
            ring.append(point)
    return ring


def clean_size(size: Any) -> float | None:
    """Return ``"1.2 ha"`` as ``1.2``; non-strings are returned unchanged."""
    if not isinstance(size, str):
        return size
    try:
        return float(_TRAILING_UNIT.sub("", size))
    except ValueError:
        return None


def clean_title(location: str) -> str:
    """Strip a trailing ``HAZARD REDUCTION`` from the record's location."""
    return _TRAILING_TITLE.sub("", location)


def clean_date(date: Any, *, timezone: str = DEFAULT_FEED_TIMEZONE) -> str | None:
    """Return ``"18/10/2020"`` as ``"2020-10-18"``; ``None`` if unparseable."""
    if not isinstance(date, str):
        return None
    try:
        return to_iso_date(date, HAZARD_REDUCTION_DATE_FORMAT, timezone=timezone)
    except ValueError:
        return None

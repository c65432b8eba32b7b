"""Feed cleaning activity: one pass over the major-incidents FeatureCollection.

Per feature the geometry is normalised and given RFC 7946 winding order
and the properties are cleaned; the feature list is then optionally
exploded and sorted so the most important incidents draw last (on top).

No error in one feature aborts the batch.  A feature whose geometry
cannot be cleaned gets a null geometry, one whose properties cannot be
cleaned keeps them as published.  Every recovered problem lands in the
caller's ``Diagnostics``, in feature order, even when features are
processed on a thread pool.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from rfs_feed.activities.clean_properties import clean_properties
from rfs_feed.activities.normalize_geometry import normalize_geojson
from rfs_feed.core.config import FeedConfig
from rfs_feed.core.constants import (
    ALERT_LEVEL_SORT_INDEX,
    DEFAULT_ALERT_LEVEL_SORT_INDEX,
    DEFAULT_STATUS_SORT_INDEX,
    STATUS_SORT_INDEX,
)
from rfs_feed.core.diagnostics import Diagnostics
from rfs_feed.core.exceptions import PermanentError
from rfs_feed.models.contracts import FeatureCollectionDict, FeatureDict, GeometryDict
from rfs_feed.models.geometry import ABSENT
from rfs_feed.utils.geojson import rewind_geometry, round_coordinates
from rfs_feed.utils.helpers import extract_incident_id

logger = logging.getLogger("rfs_feed.activities.clean_feed")


class FeatureCleaningError(PermanentError):
    """One feature's geometry or properties could not be cleaned."""

    default_stage = "clean_feed"
    default_code = "FEATURE_CLEAN_FAILED"


def clean_feed(
    geojson: FeatureCollectionDict,
    *,
    config: FeedConfig | None = None,
    diagnostics: Diagnostics | None = None,
) -> FeatureCollectionDict:
    """Clean an upstream major-incidents FeatureCollection.

    Args:
        geojson: The upstream FeatureCollection (not mutated).
        config: Cleaner options (defaults when ``None``).
        diagnostics: Receives every recovered problem.

    Returns:
        A new FeatureCollection.
    """
    config = config or FeedConfig()
    features = geojson.get("features") or []

    if config.max_workers > 1 and len(features) > 1:
        with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
            results = list(executor.map(lambda f: _clean_feature(f, config), features))
    else:
        results = [_clean_feature(feature, config) for feature in features]

    cleaned: list[FeatureDict] = []
    for feature, feature_diagnostics in results:
        if diagnostics is not None:
            diagnostics.extend(feature_diagnostics)
        if config.avoid_geometry_collections:
            cleaned.extend(explode_feature(feature))
        else:
            cleaned.append(feature)

    cleaned = sorted(cleaned, key=sort_key, reverse=True)

    logger.info(
        "Cleaned feed | input=%d | output=%d | null_geometries=%d | workers=%d",
        len(features),
        len(cleaned),
        sum(1 for f in cleaned if f["geometry"] is None),
        config.max_workers,
    )
    return {"type": "FeatureCollection", "features": cleaned}


def _clean_feature(
    feature: FeatureDict,
    config: FeedConfig,
) -> tuple[FeatureDict, Diagnostics]:
    properties = feature.get("properties")
    if not isinstance(properties, dict):
        properties = {}
    reference = feature.get("id") or properties.get("guid") or ""
    diagnostics = Diagnostics(correlation_id=str(reference))

    try:
        geometry = _clean_geometry(feature.get("geometry", ABSENT), config, diagnostics)
    except Exception as exc:
        _report_failure("Feature geometry could not be cleaned; set to null", exc, diagnostics)
        geometry = None

    try:
        cleaned_properties = clean_properties(
            properties, timezone=config.feed_timezone, diagnostics=diagnostics
        )
    except Exception as exc:
        _report_failure(
            "Feature properties could not be cleaned; kept as published", exc, diagnostics
        )
        cleaned_properties = dict(properties)

    cleaned: FeatureDict = {
        "type": "Feature",
        "geometry": geometry,
        "properties": cleaned_properties,
    }
    incident_id = feature.get("id")
    if incident_id is None:
        incident_id = extract_incident_id(properties.get("guid"))
    if incident_id is not None:
        cleaned["id"] = incident_id
    return cleaned, diagnostics


def _clean_geometry(
    geometry: Any,
    config: FeedConfig,
    diagnostics: Diagnostics,
) -> GeometryDict | None:
    normalized = rewind_geometry(
        normalize_geojson(geometry, config=config, diagnostics=diagnostics)
    )
    if config.coordinate_precision is not None:
        normalized = round_coordinates(normalized, config.coordinate_precision)
    return normalized  # type: ignore[return-value]


def _report_failure(message: str, exc: Exception, diagnostics: Diagnostics) -> None:
    error = FeatureCleaningError(f"{message}: {exc}")
    error.__cause__ = exc
    diagnostics.report(error)


def explode_feature(feature: FeatureDict) -> list[FeatureDict]:
    """Split a GeometryCollection feature into one feature per member.

    Every part gets its own copy of the properties.  Features with any
    other geometry (or none) are returned as the only element.
    """
    geometry = feature.get("geometry")
    if geometry is None or geometry.get("type") != "GeometryCollection":
        return [feature]
    return [
        {**feature, "geometry": member, "properties": dict(feature.get("properties") or {})}
        for member in geometry.get("geometries") or []
    ]


def sort_key(feature: FeatureDict) -> tuple[int, int]:
    """Return ``(status index, alert-level index)``; lower is more important."""
    properties = feature.get("properties") or {}
    return (
        status_sort_index(properties.get("status")),
        alert_level_sort_index(properties.get("alert-level")),
    )


def status_sort_index(value: object) -> int:
    if not isinstance(value, str):
        return DEFAULT_STATUS_SORT_INDEX
    return STATUS_SORT_INDEX.get(value, DEFAULT_STATUS_SORT_INDEX)


def alert_level_sort_index(value: object) -> int:
    if not isinstance(value, str):
        return DEFAULT_ALERT_LEVEL_SORT_INDEX
    return ALERT_LEVEL_SORT_INDEX.get(value, DEFAULT_ALERT_LEVEL_SORT_INDEX)

"""Canonical GeoJSON document contracts.

The cleaner consumes and produces plain JSON dicts.  These ``TypedDict``
definitions name the members each stage relies on so that pyright
catches key mismatches; nothing here converts or validates at runtime.
"""

from __future__ import annotations

from typing import Any, NotRequired, TypedDict

# ---------------------------------------------------------------------------
# GeoJSON (RFC 7946)
# ---------------------------------------------------------------------------


class GeometryDict(TypedDict, total=False):
    """A GeoJSON geometry; ``geometries`` only for GeometryCollection."""

    type: str
    coordinates: Any
    geometries: list[GeometryDict]


class FeatureDict(TypedDict):
    """A GeoJSON Feature as published by, and returned to, the feed."""

    type: str
    geometry: GeometryDict | None
    properties: dict[str, Any]
    id: NotRequired[str | int]


class FeatureCollectionDict(TypedDict):
    """A GeoJSON FeatureCollection."""

    type: str
    features: list[FeatureDict]


# ---------------------------------------------------------------------------
# Hazard reduction feed (tabular JSON)
# ---------------------------------------------------------------------------


class HazardReductionPolygon(TypedDict):
    """One polygon of a burn, as ``"lat;lon|lat;lon|..."``."""

    polygon: str


class HazardReductionRecord(TypedDict):
    """One planned hazard reduction burn."""

    guarReference: str
    leadAgency: str
    supportingAgencies: str
    size: str | float | None
    location: str
    tenure: str
    startDate: str
    endDate: str
    geometryType: str
    polygons: list[HazardReductionPolygon]


class HazardReductionPayload(TypedDict):
    """Top-level hazard reduction feed document."""

    results: list[HazardReductionRecord]

"""Removal of degenerate polygons.

The feed regularly contains polygon "parts" whose vertices all
coincide, left behind by the upstream renderer.  They enclose no area
and must never reach the union.

Invalid rings are discarded one at a time: a short or flat hole is
removed from an otherwise sound polygon, a collapsed part is removed
from a MultiPolygon.  Only a polygon whose exterior ring is unusable or
whose area is zero is dropped as a whole.
"""

from __future__ import annotations

import logging
from typing import Any

from rfs_feed.activities.normalize_geometry._constants import MIN_RING_POINTS
from rfs_feed.core.exceptions import DegenerateGeometryError
from rfs_feed.models.geometry import Geometry, GeometryFamily, GeometryType

logger = logging.getLogger("rfs_feed.activities.normalize_geometry")


def polygon_area(polygon: Geometry) -> float:
    """Planar area of a Polygon in squared coordinate units.

    Invalid holes are ignored.

    Raises:
        DegenerateGeometryError: If the exterior ring cannot form a
            linear ring (missing coordinates, or fewer than 4 points).
    """
    return _rings_area(polygon_rings(polygon.coordinates))


def polygon_rings(coordinates: Any) -> list[Any]:
    """Return the usable rings of one polygon's coordinate array.

    Holes with fewer than 4 points, or enclosing no area, are left out.

    Raises:
        DegenerateGeometryError: If the exterior ring is unusable.
    """
    if not coordinates or not isinstance(coordinates, list | tuple):
        msg = "Polygon has no rings"
        raise DegenerateGeometryError(msg)

    exterior, *holes = coordinates
    _ring_area(exterior)
    rings = [exterior]
    for hole in holes:
        try:
            area = _ring_area(hole)
        except DegenerateGeometryError as exc:
            logger.debug("Dropped invalid hole | %s", exc.message)
            continue
        if area == 0:
            logger.debug("Dropped zero-area hole | points=%d", len(hole))
            continue
        rings.append(hole)
    return rings


def drop_degenerate_polygons(entries: list[Geometry | None]) -> list[Geometry | None]:
    """Remove zero-area and unbuildable polygons; keep everything else in order.

    Polygons lose their invalid holes and MultiPolygons their degenerate
    parts.  A MultiPolygon left with a single part becomes a Polygon.
    """
    kept: list[Geometry | None] = []
    for entry in entries:
        if entry is not None and entry.family is GeometryFamily.POLYGON:
            entry = _without_degenerate_parts(entry)
            if entry is None:
                continue
        kept.append(entry)
    return kept


def _without_degenerate_parts(polygon: Geometry) -> Geometry | None:
    parts = polygon.parts()
    kept = []
    for part in parts:
        try:
            rings = polygon_rings(part)
            area = _rings_area(rings)
        except DegenerateGeometryError as exc:
            logger.debug("Dropped degenerate polygon | %s", exc.message)
            continue
        if area == 0:
            logger.debug("Dropped zero-area polygon | rings=%d", len(rings))
            continue
        kept.append(rings)

    if not kept:
        return None
    if kept == parts:
        return polygon
    if len(kept) == 1:
        return Geometry(type=GeometryType.POLYGON, coordinates=kept[0])
    return Geometry(type=GeometryType.MULTI_POLYGON, coordinates=kept)


def _ring_area(ring: Any) -> float:
    if not isinstance(ring, list | tuple) or len(ring) < MIN_RING_POINTS:
        count = len(ring) if isinstance(ring, list | tuple) else 0
        msg = f"Polygon ring has {count} point(s), need at least {MIN_RING_POINTS}"
        raise DegenerateGeometryError(msg)
    return _rings_area([ring])


def _rings_area(rings: list[Any]) -> float:
    from shapely.errors import ShapelyError
    from shapely.geometry import Polygon

    try:
        shape = Polygon(rings[0], rings[1:])
    except (ValueError, TypeError, ShapelyError) as exc:
        msg = f"Cannot build polygon from rings: {exc}"
        raise DegenerateGeometryError(msg) from exc
    return float(shape.area)

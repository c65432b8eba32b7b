"""Geodesic-aware buffering of lon/lat geometries.

Buffer distances are metric, so the geometry is projected into a local
azimuthal equidistant (AEQD) projection centred on itself, buffered in
metres, and projected back to WGS 84.  Centring the projection on the
shape keeps distortion negligible at feed scales anywhere on the globe,
including near the poles.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rfs_feed.activities.normalize_geometry._constants import BUFFER_QUAD_SEGS, METRES_PER_UNIT

if TYPE_CHECKING:
    from shapely.geometry.base import BaseGeometry

WGS84 = "EPSG:4326"


def geodesic_buffer(
    shape: BaseGeometry,
    distance: float,
    *,
    units: str = "meters",
) -> BaseGeometry:
    """Grow (positive ``distance``) or shrink (negative) a lon/lat shape.

    Mitred joins keep the corners of the feed's rectilinear parts sharp,
    so growing then shrinking by the same distance returns the original
    outline wherever no gap was closed.

    Args:
        shape: Shapely geometry in WGS 84 lon/lat.
        distance: Buffer distance in ``units``.
        units: ``"meters"`` or ``"kilometers"`` (British spellings accepted).

    Returns:
        The buffered shapely geometry in WGS 84 lon/lat.

    Raises:
        ValueError: If ``units`` is not recognised or ``shape`` is empty.
    """
    try:
        distance_m = distance * METRES_PER_UNIT[units]
    except KeyError as exc:
        msg = f"Unsupported buffer unit {units!r}; expected one of {sorted(METRES_PER_UNIT)}"
        raise ValueError(msg) from exc
    if shape.is_empty:
        msg = "Cannot buffer an empty geometry"
        raise ValueError(msg)

    from pyproj import CRS, Transformer
    from shapely.ops import transform

    centre = shape.centroid
    local_crs = CRS.from_proj4(
        f"+proj=aeqd +lat_0={centre.y} +lon_0={centre.x} "
        "+x_0=0 +y_0=0 +datum=WGS84 +units=m +no_defs"
    )
    to_local = Transformer.from_crs(WGS84, local_crs, always_xy=True)
    to_wgs = Transformer.from_crs(local_crs, WGS84, always_xy=True)

    projected = transform(to_local.transform, shape)
    buffered = projected.buffer(distance_m, quad_segs=BUFFER_QUAD_SEGS, join_style="mitre")
    return transform(to_wgs.transform, buffered)

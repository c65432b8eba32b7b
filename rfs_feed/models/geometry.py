"""Data model for feed geometries.

A ``Geometry`` is a closed tagged value over ``GeometryType``.  The
feed's loosely-typed GeoJSON ``type`` strings are parsed into the enum
once, at the boundary, so every later stage can dispatch on a finite
set of kinds (and on their ``GeometryFamily``).

``ABSENT`` marks a feature that carried no ``geometry`` member at all,
which is distinct both from an explicit ``null`` geometry (``None``)
and from a structurally-empty GeometryCollection.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final

from rfs_feed.core.exceptions import InputShapeError

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class GeometryType(enum.Enum):
    """GeoJSON geometry kinds understood by the cleaner."""

    POINT = "Point"
    LINE_STRING = "LineString"
    POLYGON = "Polygon"
    MULTI_POINT = "MultiPoint"
    MULTI_LINE_STRING = "MultiLineString"
    MULTI_POLYGON = "MultiPolygon"
    GEOMETRY_COLLECTION = "GeometryCollection"


class GeometryFamily(enum.Enum):
    """Grouping of single- and multi-part kinds used by the type reducer.

    Values:
        POINT:   Point, MultiPoint.
        LINE:    LineString, MultiLineString.
        POLYGON: Polygon, MultiPolygon.
        OTHER:   Anything that cannot be merged (GeometryCollection).
    """

    POINT = "point"
    LINE = "line"
    POLYGON = "polygon"
    OTHER = "other"


_FAMILIES: Final[dict[GeometryType, GeometryFamily]] = {
    GeometryType.POINT: GeometryFamily.POINT,
    GeometryType.MULTI_POINT: GeometryFamily.POINT,
    GeometryType.LINE_STRING: GeometryFamily.LINE,
    GeometryType.MULTI_LINE_STRING: GeometryFamily.LINE,
    GeometryType.POLYGON: GeometryFamily.POLYGON,
    GeometryType.MULTI_POLYGON: GeometryFamily.POLYGON,
    GeometryType.GEOMETRY_COLLECTION: GeometryFamily.OTHER,
}

MULTI_TYPES: Final[dict[GeometryFamily, GeometryType]] = {
    GeometryFamily.POINT: GeometryType.MULTI_POINT,
    GeometryFamily.LINE: GeometryType.MULTI_LINE_STRING,
    GeometryFamily.POLYGON: GeometryType.MULTI_POLYGON,
}

_MULTI_PART_TYPES: Final = frozenset(MULTI_TYPES.values())


# ---------------------------------------------------------------------------
# Absent marker
# ---------------------------------------------------------------------------


class _Absent:
    """Singleton type of ``ABSENT``."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Final = _Absent()
"""The feed supplied no geometry member for a feature."""


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Geometry:
    """A single GeoJSON geometry.

    Attributes:
        type: Geometry kind.
        coordinates: GeoJSON coordinate array for every kind except
            GeometryCollection (``None`` when the feed omitted it).
        geometries: Members of a GeometryCollection, empty otherwise.
    """

    type: GeometryType
    coordinates: Any = None
    geometries: tuple[Geometry, ...] = ()

    @property
    def family(self) -> GeometryFamily:
        return _FAMILIES[self.type]

    @property
    def is_collection(self) -> bool:
        return self.type is GeometryType.GEOMETRY_COLLECTION

    @property
    def is_multi_part(self) -> bool:
        return self.type in _MULTI_PART_TYPES

    def parts(self) -> list[Any]:
        """Coordinates of each single part (one entry for single-part kinds).

        A multi-part geometry whose coordinates are missing or not an
        array has no parts.
        """
        if self.is_collection:
            msg = "A GeometryCollection has members, not parts"
            raise TypeError(msg)
        if self.is_multi_part:
            if not isinstance(self.coordinates, list | tuple):
                return []
            return list(self.coordinates)
        return [self.coordinates]

    @classmethod
    def multi(cls, family: GeometryFamily, parts: list[Any]) -> Geometry:
        """Build the multi-part geometry of ``family`` from single-part coordinates."""
        if family not in MULTI_TYPES:
            msg = f"Family {family.value!r} has no multi-part form"
            raise ValueError(msg)
        return cls(type=MULTI_TYPES[family], coordinates=parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a GeoJSON geometry mapping."""
        if self.is_collection:
            return {
                "type": self.type.value,
                "geometries": [member.to_dict() for member in self.geometries],
            }
        return {"type": self.type.value, "coordinates": _copy_coordinates(self.coordinates)}

    @classmethod
    def from_dict(cls, data: object) -> Geometry:
        """Parse a GeoJSON geometry mapping, including nested collections.

        Coordinates are copied so the result never aliases the input.

        Raises:
            InputShapeError: If ``data`` (or any collection member) is not
                a mapping or has a missing or unknown ``type``.
        """
        geometry_type = parse_geometry_type(data)
        mapping: Mapping[str, Any] = data  # type: ignore[assignment]
        if geometry_type is GeometryType.GEOMETRY_COLLECTION:
            members = mapping.get("geometries") or []
            if not isinstance(members, list | tuple):
                msg = f"GeometryCollection geometries must be a list, got {type(members).__name__}"
                raise InputShapeError(msg)
            return cls(type=geometry_type, geometries=tuple(cls.from_dict(m) for m in members))
        return cls(type=geometry_type, coordinates=_copy_coordinates(mapping.get("coordinates")))


def parse_geometry_type(data: object) -> GeometryType:
    """Return the ``GeometryType`` of a GeoJSON geometry mapping.

    Raises:
        InputShapeError: If ``data`` is not a mapping or its ``type`` is
            missing or not a GeoJSON geometry type.
    """
    if not isinstance(data, Mapping):
        msg = f"Geometry must be a mapping, got {type(data).__name__}"
        raise InputShapeError(msg)
    raw_type = data.get("type")
    if raw_type is None:
        msg = "Geometry is missing its 'type' member"
        raise InputShapeError(msg)
    try:
        return GeometryType(raw_type)
    except ValueError as exc:
        msg = f"Unknown geometry type {raw_type!r}"
        raise InputShapeError(msg) from exc


def _copy_coordinates(value: Any) -> Any:
    if isinstance(value, list | tuple):
        return [_copy_coordinates(v) for v in value]
    return value

"""Reduction of a flat geometry list to its simplest representation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rfs_feed.models.geometry import Geometry, GeometryFamily, GeometryType

if TYPE_CHECKING:
    from collections.abc import Sequence

# Canonical member order of a mixed GeometryCollection
FAMILY_ORDER: tuple[GeometryFamily, ...] = (
    GeometryFamily.POINT,
    GeometryFamily.LINE,
    GeometryFamily.POLYGON,
)


def reduce_geometries(entries: Sequence[Geometry]) -> Geometry | None:
    """Collapse ``entries`` into one geometry.

    - No entries: ``None``.
    - One entry: returned as is.
    - One family: a single member as is, several promoted to the family's
      multi-part type with parts in entry order.
    - Mixed families: a GeometryCollection holding one (possibly
      promoted) member per family, ordered Point, LineString, Polygon,
      followed by any other geometries in entry order.
    """
    if not entries:
        return None
    if len(entries) == 1:
        return entries[0]

    buckets: dict[GeometryFamily, list[Geometry]] = {family: [] for family in GeometryFamily}
    for entry in entries:
        buckets[entry.family].append(entry)

    others = buckets[GeometryFamily.OTHER]
    occupied = [family for family in FAMILY_ORDER if buckets[family]]
    if not others and len(occupied) == 1:
        return merge_family(buckets[occupied[0]])

    members = [merge_family(buckets[family]) for family in occupied]
    members.extend(others)
    return Geometry(type=GeometryType.GEOMETRY_COLLECTION, geometries=tuple(members))


def merge_family(members: Sequence[Geometry]) -> Geometry:
    """Merge same-family geometries into one, promoting to multi-part when needed."""
    if len(members) == 1:
        return members[0]
    family = members[0].family
    parts: list[Any] = []
    for member in members:
        if member.family is not family:
            msg = f"Cannot merge {member.type.value} into the {family.value} family"
            raise ValueError(msg)
        parts.extend(member.parts())
    return Geometry.multi(family, parts)

"""Data models and schemas.

Defines the data structures used throughout the cleaner:
- Geometry: Closed tagged geometry value and the ABSENT marker
- Contracts: TypedDict shapes of the GeoJSON and hazard reduction documents
- CleanReport: Per-run summary of counts and recovered problems
"""

from rfs_feed.models.geometry import (
    ABSENT,
    Geometry,
    GeometryFamily,
    GeometryType,
)
from rfs_feed.models.report import CleanReport, WarningRecord, build_report

__all__ = [
    "ABSENT",
    "CleanReport",
    "Geometry",
    "GeometryFamily",
    "GeometryType",
    "WarningRecord",
    "build_report",
]

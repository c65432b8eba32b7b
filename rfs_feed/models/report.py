"""Pydantic run report for one feed cleaning pass.

The report is the audit trail of a run: how many features went in and
came out, how many ended with a null geometry, and every recoverable
problem the diagnostics channel collected along the way.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from rfs_feed.core.diagnostics import Diagnostics

# Schema version for forward compatibility
SCHEMA_VERSION = "feed-clean-report-v1"


class WarningRecord(BaseModel):
    """One recovered problem, mirrored from ``DiagnosticEvent``."""

    category: str
    code: str
    stage: str
    message: str
    correlation_id: str = ""
    cause: str = ""


class CleanReport(BaseModel):
    """Summary of one ``clean_feed`` run.

    Attributes:
        schema_version: Report schema identifier.
        generated_at: Report creation timestamp (ISO 8601, UTC).
        input_feature_count: Features in the upstream document.
        output_feature_count: Features in the cleaned document.
        null_geometry_count: Output features whose geometry is ``null``.
        warning_counts: Number of recovered problems per error code.
        warnings: Every recovered problem in the order it occurred.
    """

    schema_version: str = SCHEMA_VERSION
    generated_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    input_feature_count: int = 0
    output_feature_count: int = 0
    null_geometry_count: int = 0
    warning_counts: dict[str, int] = Field(default_factory=dict)
    warnings: list[WarningRecord] = Field(default_factory=list)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)


def build_report(
    diagnostics: Diagnostics,
    *,
    input_count: int,
    output: dict[str, Any],
) -> CleanReport:
    """Build a ``CleanReport`` from a finished run.

    Args:
        diagnostics: Collector passed to ``clean_feed``.
        input_count: Number of features in the upstream document.
        output: The cleaned FeatureCollection.
    """
    features = output.get("features") or []
    return CleanReport(
        input_feature_count=input_count,
        output_feature_count=len(features),
        null_geometry_count=sum(1 for f in features if f.get("geometry") is None),
        warning_counts=diagnostics.counts(),
        warnings=[WarningRecord(**event.to_dict()) for event in diagnostics.events],
    )

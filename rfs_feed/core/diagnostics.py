"""Diagnostics channel for recoverable, non-fatal problems.

Geometry and property cleaning never abort a feed because of one bad
feature.  Instead, the stage that recovered reports the error here:
the event is logged at WARNING and kept so the caller can surface
aggregated warning counts (see ``rfs_feed.models.report``).

A ``Diagnostics`` instance belongs to one caller.  Concurrent feature
processing gives every task its own instance and merges them with
``extend()`` in input order afterwards.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rfs_feed.core.exceptions import PipelineError

logger = logging.getLogger("rfs_feed.core.diagnostics")


@dataclass(frozen=True, slots=True)
class DiagnosticEvent:
    """A single recovered problem.

    Attributes:
        category: Taxonomy category of the underlying error.
        code: Machine-readable error code.
        stage: Pipeline stage that recovered.
        message: Human-readable description.
        correlation_id: Identifier of the affected feature, if known.
        cause: ``repr`` of the underlying exception, if any.
    """

    category: str
    code: str
    stage: str
    message: str
    correlation_id: str = ""
    cause: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "correlation_id": self.correlation_id,
            "cause": self.cause,
        }


@dataclass(slots=True)
class Diagnostics:
    """Ordered collector of ``DiagnosticEvent`` records.

    Attributes:
        correlation_id: Default correlation identifier stamped on events
            whose error does not carry one.
        events: Events in the order they were reported.
    """

    correlation_id: str = ""
    events: list[DiagnosticEvent] = field(default_factory=list)

    def report(self, error: PipelineError) -> DiagnosticEvent:
        """Record ``error`` and log it.  Never raises."""
        payload = error.to_error_dict()
        cause = error.__cause__
        event = DiagnosticEvent(
            category=str(payload["category"]),
            code=str(payload["code"]),
            stage=str(payload["stage"]),
            message=str(payload["message"]),
            correlation_id=str(payload["correlation_id"]) or self.correlation_id,
            cause=repr(cause) if cause is not None else "",
        )
        self.events.append(event)
        logger.warning(
            "Recovered %s error | code=%s | stage=%s | feature=%s | %s%s",
            event.category,
            event.code,
            event.stage,
            event.correlation_id or "-",
            event.message,
            f" | cause={event.cause}" if event.cause else "",
        )
        return event

    def extend(self, other: Diagnostics) -> None:
        """Append every event of ``other`` without logging them again."""
        self.events.extend(other.events)

    def counts(self) -> dict[str, int]:
        """Return the number of events per error code."""
        return dict(Counter(event.code for event in self.events))

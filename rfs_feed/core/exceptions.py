"""Unified exception taxonomy.

Provides a shared base exception hierarchy for the feed cleaner. Every
domain exception inherits from ``PipelineError`` and carries structured
context fields that let the diagnostics channel record recoverable
problems in a consistent shape.

Taxonomy categories
-------------------
- ``ValidationError``   : input/contract violations, never retryable.
- ``TransientError``    : temporary failures, retryable.
- ``PermanentError``    : unrecoverable domain failures, not retryable.
- ``ContractError``     : payload/schema drift between stages, never retryable.

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for the run report and logging.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all feed-cleaning errors.

    Attributes:
        message: Human-readable error description.
        stage: Pipeline stage where the error occurred
            (e.g. ``"flatten"``, ``"union"``).
        code: Machine-readable error code (e.g. ``"UNION_FAILED"``).
        retryable: Whether re-running the operation could succeed.
        correlation_id: Identifier of the feature being processed.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(PipelineError):
    """Input or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(PipelineError):
    """Temporary failure that may succeed on retry."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(PipelineError):
    """Unrecoverable domain failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(PipelineError):
    """Payload or schema drift between pipeline stages. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Geometry errors
# ---------------------------------------------------------------------------


class InputShapeError(ValidationError):
    """A geometry tree node is malformed (missing or unknown ``type``, too deep)."""

    default_stage = "flatten"
    default_code = "GEOMETRY_SHAPE_INVALID"


class DegenerateGeometryError(ValidationError):
    """A polygon ring is too short or encloses zero area."""

    default_stage = "degenerate_filter"
    default_code = "GEOMETRY_DEGENERATE"


class UnionComputationError(PermanentError):
    """The polygon union (or its buffering) failed for this feature."""

    default_stage = "union"
    default_code = "UNION_FAILED"


class BudgetExceededError(UnionComputationError):
    """The polygon union exceeded its time or vertex budget."""

    default_code = "UNION_BUDGET_EXCEEDED"


# ---------------------------------------------------------------------------
# Property errors
# ---------------------------------------------------------------------------


class PropertyParseError(ValidationError):
    """A feed property could not be parsed and was kept verbatim."""

    default_stage = "clean_properties"
    default_code = "PROPERTY_PARSE_FAILED"


class PropertyConflictError(ValidationError):
    """Two feed properties that should agree carry different values."""

    default_stage = "clean_properties"
    default_code = "PROPERTY_CONFLICT"

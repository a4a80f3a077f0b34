"""Takeoff exception taxonomy.

Every domain exception inherits from ``TakeoffError`` and carries
structured context fields so that the HTTP shell (and any other caller)
can map failures to responses and log them consistently.

Taxonomy categories
-------------------
- ``ValidationError``:   input violates a domain invariant (degenerate
  polygon, negative length, unsupported waste percentage).
- ``ContractError``:     request payload is missing keys or has the
  wrong shape.
- ``PermanentError``:    deterministic failure of a single computation
  (e.g. a formula that references an unknown identifier).

Only these conditions are fatal.  Unparseable footprint text, missing
linear features and unknown brand selections are handled as warnings or
fallbacks and never raise.

Every exception exposes ``to_error_dict()`` for a stable structured
error payload.
"""

from __future__ import annotations


class TakeoffError(Exception):
    """Base exception for all takeoff-domain errors.

    Attributes:
        message: Human-readable error description.
        stage: Stage where the error occurred
            (e.g. ``"vertex_validation"``, ``"formula_evaluation"``).
        code: Machine-readable error code (e.g. ``"VALIDATION_ERROR"``).
        correlation_id: Request correlation identifier, if the caller has one.
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
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        return "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(TakeoffError):
    """Input or domain-model validation failure."""

    default_code = "VALIDATION_ERROR"


class ContractError(TakeoffError):
    """Request payload or schema drift between caller and core."""

    default_code = "CONTRACT_VIOLATION"


class PermanentError(TakeoffError):
    """Deterministic failure of a single computation."""

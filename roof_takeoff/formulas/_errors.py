"""Formula evaluation errors.

All formula failures are permanent: the same expression against the same
scalar table fails the same way every time.  The evaluator never
substitutes zero or an empty string for a value it cannot compute.
"""

from __future__ import annotations

from roof_takeoff.core.exceptions import PermanentError


class FormulaEvaluationError(PermanentError):
    """Raised when an expression cannot be evaluated.

    Attributes:
        expression: The expression text.
    """

    default_stage = "formula_evaluation"
    default_code = "FORMULA_EVALUATION_FAILED"

    def __init__(self, message: str, *, expression: str = "") -> None:
        self.expression = expression
        super().__init__(message)


class FormulaSyntaxError(FormulaEvaluationError):
    """Raised when an expression is malformed.

    Attributes:
        position: Character offset of the offending token, if known.
    """

    default_code = "FORMULA_SYNTAX_ERROR"

    def __init__(self, message: str, *, expression: str = "", position: int = -1) -> None:
        self.position = position
        if position >= 0:
            message = f"{message} at position {position}"
        super().__init__(message, expression=expression)


class UnknownIdentifierError(FormulaEvaluationError):
    """Raised when an expression references a key missing from the scalar table.

    Attributes:
        identifier: The unresolved dotted key.
    """

    default_code = "FORMULA_UNKNOWN_IDENTIFIER"

    def __init__(self, identifier: str, *, expression: str = "") -> None:
        self.identifier = identifier
        super().__init__(f"Unknown identifier {identifier!r}", expression=expression)

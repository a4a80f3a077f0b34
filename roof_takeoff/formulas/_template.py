"""Template rendering: ``{{ expression }}`` placeholder substitution."""

from __future__ import annotations

import re
from collections.abc import Mapping

from roof_takeoff.formulas._errors import FormulaEvaluationError
from roof_takeoff.formulas._evaluator import evaluate_expression

_PLACEHOLDER_RE = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)


def format_number(value: float, precision: int = 2) -> str:
    """Format a formula result for display.

    Whole numbers print without decimals; anything else is rounded to
    *precision* decimals with trailing zeros trimmed.
    """
    rounded = round(value, precision)
    if rounded == 0:
        return "0"
    if float(rounded).is_integer():
        return str(int(rounded))
    return f"{rounded:.{precision}f}".rstrip("0").rstrip(".")


def render_template(
    template: str,
    scalars: Mapping[str, float],
    *,
    precision: int = 2,
) -> str:
    """Replace every ``{{ expression }}`` in *template* with its value.

    Rendering fails as a whole if any placeholder fails.

    Raises:
        FormulaSyntaxError: If a placeholder expression is malformed.
        UnknownIdentifierError: If a placeholder references a missing key.
        FormulaEvaluationError: If a placeholder cannot be computed.
    """
    if precision < 0:
        msg = f"precision must be >= 0, got {precision}"
        raise FormulaEvaluationError(msg)

    def _substitute(match: re.Match[str]) -> str:
        value = evaluate_expression(match.group(1).strip(), scalars)
        return format_number(value, precision)

    return _PLACEHOLDER_RE.sub(_substitute, template)

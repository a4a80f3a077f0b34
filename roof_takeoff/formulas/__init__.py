"""Formula evaluation for document templates.

Expressions are small arithmetic formulas over the scalar table built by
the material engine::

    ceil((lf.ridge + lf.hip) / 33)
    ceil(waste.10pct.squares * 3)

Supported: numbers, ``+ - * /``, unary ``+``/``-``, parentheses, dotted
identifiers and the functions ``ceil``, ``floor``, ``round``, ``min`` and
``max``.  Evaluation fails closed: an unknown identifier, a malformed
expression (including one longer than ``MAX_TOKENS`` tokens or nested
deeper than ``MAX_NESTING`` levels), a division by zero or a non-finite
intermediate raises rather than rendering a default.
"""

from __future__ import annotations

from roof_takeoff.formulas._errors import (
    FormulaEvaluationError,
    FormulaSyntaxError,
    UnknownIdentifierError,
)
from roof_takeoff.formulas._evaluator import (
    FUNCTIONS,
    evaluate_expression,
    referenced_identifiers,
)
from roof_takeoff.formulas._parser import MAX_NESTING, MAX_TOKENS, parse
from roof_takeoff.formulas._template import format_number, render_template

__all__ = [
    "FUNCTIONS",
    "MAX_NESTING",
    "MAX_TOKENS",
    "FormulaEvaluationError",
    "FormulaSyntaxError",
    "UnknownIdentifierError",
    "evaluate_expression",
    "format_number",
    "parse",
    "referenced_identifiers",
    "render_template",
]

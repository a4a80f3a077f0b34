"""Formula evaluation against a scalar table.

Evaluation walks the parsed syntax tree; no Python ``eval`` is involved
and the scalar table is never modified.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping

from roof_takeoff.formulas._errors import (
    FormulaEvaluationError,
    FormulaSyntaxError,
    UnknownIdentifierError,
)
from roof_takeoff.formulas._parser import (
    BinaryOp,
    Call,
    Identifier,
    Node,
    Number,
    UnaryOp,
    parse,
)

logger = logging.getLogger("roof_takeoff.formulas")

# Rounding applied before ceil/floor so float noise does not cross an integer
_NOISE_DECIMALS = 9


def _ceil(x: float) -> float:
    return float(math.ceil(round(x, _NOISE_DECIMALS)))


def _floor(x: float) -> float:
    return float(math.floor(round(x, _NOISE_DECIMALS)))


def _round(x: float, digits: float = 0.0) -> float:
    if not float(digits).is_integer():
        msg = f"round() digits must be a whole number, got {digits!r}"
        raise FormulaEvaluationError(msg)
    return float(round(x, int(digits)))


def _min(*args: float) -> float:
    return min(args)


def _max(*args: float) -> float:
    return max(args)


# name -> (callable, min args, max args)
FUNCTIONS: dict[str, tuple[Callable[..., float], int, int]] = {
    "ceil": (_ceil, 1, 1),
    "floor": (_floor, 1, 1),
    "round": (_round, 1, 2),
    "min": (_min, 1, 64),
    "max": (_max, 1, 64),
}


class _Evaluator:
    def __init__(self, expression: str, scalars: Mapping[str, float]) -> None:
        self.expression = expression
        self.scalars = scalars

    def visit(self, node: Node) -> float:
        if isinstance(node, Number):
            return node.value
        if isinstance(node, Identifier):
            return self.lookup(node.name)
        if isinstance(node, UnaryOp):
            value = self.visit(node.operand)
            return -value if node.op == "-" else value
        if isinstance(node, BinaryOp):
            return self.binary(node)
        if isinstance(node, Call):
            return self.call(node)
        msg = f"Unsupported node {type(node).__name__}"
        raise FormulaEvaluationError(msg, expression=self.expression)

    def lookup(self, name: str) -> float:
        if name not in self.scalars:
            raise UnknownIdentifierError(name, expression=self.expression)
        value = self.scalars[name]
        if isinstance(value, bool) or not isinstance(value, int | float):
            msg = f"Identifier {name!r} is not numeric: {value!r}"
            raise FormulaEvaluationError(msg, expression=self.expression)
        return float(value)

    def binary(self, node: BinaryOp) -> float:
        left = self.visit(node.left)
        right = self.visit(node.right)
        if node.op == "+":
            return left + right
        if node.op == "-":
            return left - right
        if node.op == "*":
            return left * right
        if right == 0:
            msg = f"Division by zero in {self.expression!r}"
            raise FormulaEvaluationError(msg, expression=self.expression)
        return left / right

    def call(self, node: Call) -> float:
        entry = FUNCTIONS.get(node.function)
        if entry is None:
            msg = f"Unknown function {node.function!r}"
            raise FormulaSyntaxError(msg, expression=self.expression)
        func, min_args, max_args = entry
        if not min_args <= len(node.args) <= max_args:
            msg = (
                f"{node.function}() takes {min_args}-{max_args} argument(s), "
                f"got {len(node.args)}"
            )
            raise FormulaSyntaxError(msg, expression=self.expression)
        args = [self.visit(arg) for arg in node.args]
        if not all(math.isfinite(arg) for arg in args):
            msg = f"{node.function}() received a non-finite argument"
            raise FormulaEvaluationError(msg, expression=self.expression)
        return func(*args)


def evaluate_expression(expression: str, scalars: Mapping[str, float]) -> float:
    """Evaluate a formula such as ``"ceil((lf.ridge + lf.hip) / 33)"``.

    Args:
        expression: Formula text.
        scalars: Dotted key -> number, usually from ``build_scalar_table``.

    Returns:
        The numeric result.

    Raises:
        FormulaSyntaxError: If the expression is malformed.
        UnknownIdentifierError: If a referenced key is not in *scalars*.
        FormulaEvaluationError: On division by zero or a non-finite result.
    """
    tree = parse(expression)
    result = _Evaluator(expression, scalars).visit(tree)
    if not math.isfinite(result):
        msg = f"Expression {expression!r} produced a non-finite result"
        raise FormulaEvaluationError(msg, expression=expression)
    logger.debug("Formula evaluated | expression=%s | result=%s", expression, result)
    return result


def referenced_identifiers(expression: str) -> frozenset[str]:
    """Return the dotted keys *expression* reads from the scalar table.

    Raises:
        FormulaSyntaxError: If the expression is malformed.
    """
    names: set[str] = set()
    stack: list[Node] = [parse(expression)]
    while stack:
        node = stack.pop()
        if isinstance(node, Identifier):
            names.add(node.name)
        elif isinstance(node, UnaryOp):
            stack.append(node.operand)
        elif isinstance(node, BinaryOp):
            stack.extend((node.left, node.right))
        elif isinstance(node, Call):
            stack.extend(node.args)
    return frozenset(names)

"""Tests for the formula evaluator and template rendering.

Covers:
- Arithmetic, precedence, unary operators and parentheses
- Dotted identifiers (including digit-led segments)
- Functions: ceil, floor, round, min, max
- Fail-closed behaviour: unknown identifiers, syntax errors, division by zero
- Template placeholder substitution and number formatting
"""

from __future__ import annotations

import pytest

from roof_takeoff.formulas import (
    FUNCTIONS,
    MAX_NESTING,
    MAX_TOKENS,
    FormulaEvaluationError,
    FormulaSyntaxError,
    UnknownIdentifierError,
    evaluate_expression,
    format_number,
    referenced_identifiers,
    render_template,
)
from roof_takeoff.materials import derive_materials
from roof_takeoff.models.measurement import MeasurementSummary

SCALARS: dict[str, float] = {
    "lf.ridge": 40.0,
    "lf.hip": 20.0,
    "roof.squares": 20.0,
    "waste.10pct.squares": 2200.0000000000005 / 100.0,
    "pen.pipe_vent": 3.0,
}


class TestArithmetic:
    """Operators and precedence."""

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("1 + 2", 3.0),
            ("2 + 3 * 4", 14.0),
            ("(2 + 3) * 4", 20.0),
            ("10 / 4", 2.5),
            ("10 - 4 - 3", 3.0),
            ("24 / 4 / 2", 3.0),
            ("-2 * 3", -6.0),
            ("--2", 2.0),
            ("+5", 5.0),
            (".5 + 1.", 1.5),
        ],
    )
    def test_expressions(self, expression: str, expected: float) -> None:
        assert evaluate_expression(expression, {}) == pytest.approx(expected)

    def test_identifiers(self) -> None:
        assert evaluate_expression("lf.ridge + lf.hip", SCALARS) == 60.0

    def test_digit_led_segment(self) -> None:
        assert evaluate_expression("waste.10pct.squares", SCALARS) == pytest.approx(22.0)

    def test_scalars_not_modified(self) -> None:
        scalars = dict(SCALARS)
        evaluate_expression("ceil(lf.ridge / 33)", scalars)
        assert scalars == SCALARS


class TestFunctions:
    """Built-in functions."""

    def test_ridge_bundles(self) -> None:
        assert evaluate_expression("ceil((lf.ridge + lf.hip) / 33)", SCALARS) == 2.0

    def test_ceil_ignores_float_noise(self) -> None:
        # 22.000000000000004 * 3 must order 66 bundles, not 67
        assert evaluate_expression("ceil(waste.10pct.squares * 3)", SCALARS) == 66.0

    def test_floor(self) -> None:
        assert evaluate_expression("floor(7 / 2)", {}) == 3.0

    def test_round(self) -> None:
        assert evaluate_expression("round(3.14159, 2)", {}) == pytest.approx(3.14)
        assert evaluate_expression("round(2.6)", {}) == 3.0

    def test_round_fractional_digits_rejected(self) -> None:
        with pytest.raises(FormulaEvaluationError, match="whole number"):
            evaluate_expression("round(1.2345, 1.5)", {})

    def test_min_max(self) -> None:
        assert evaluate_expression("max(lf.ridge, lf.hip, 50)", SCALARS) == 50.0
        assert evaluate_expression("min(lf.ridge, lf.hip)", SCALARS) == 20.0
        assert evaluate_expression("max(7)", {}) == 7.0

    def test_nested_calls(self) -> None:
        assert evaluate_expression("ceil(max(pen.pipe_vent, 1) * 1.5)", SCALARS) == 5.0

    def test_function_table(self) -> None:
        assert set(FUNCTIONS) == {"ceil", "floor", "round", "min", "max"}


class TestFailClosed:
    """Failures raise; nothing renders as zero."""

    def test_unknown_identifier(self) -> None:
        with pytest.raises(UnknownIdentifierError) as exc_info:
            evaluate_expression("lf.ridge + lf.gable", SCALARS)
        assert exc_info.value.identifier == "lf.gable"
        assert exc_info.value.expression == "lf.ridge + lf.gable"

    def test_non_numeric_scalar(self) -> None:
        with pytest.raises(FormulaEvaluationError, match="not numeric"):
            evaluate_expression("roof.pitch", {"roof.pitch": "6/12"})  # type: ignore[dict-item]

    def test_division_by_zero(self) -> None:
        with pytest.raises(FormulaEvaluationError, match="Division by zero"):
            evaluate_expression("lf.ridge / (lf.hip - 20)", SCALARS)

    @pytest.mark.parametrize(
        "expression",
        ["", "   ", "1 +", "(1 + 2", "1 + 2)", "2 3", "lf.ridge lf.hip", "ceil()", "ceil(1,)", "1 % 2", "a.."],
    )
    def test_syntax_errors(self, expression: str) -> None:
        with pytest.raises(FormulaSyntaxError):
            evaluate_expression(expression, {"a": 1.0})

    def test_unknown_function(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="Unknown function 'sqrt'"):
            evaluate_expression("sqrt(4)", {})

    def test_wrong_argument_count(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="ceil\\(\\) takes 1-1"):
            evaluate_expression("ceil(1, 2)", {})

    def test_non_string_expression(self) -> None:
        with pytest.raises(FormulaSyntaxError):
            evaluate_expression(42, {})  # type: ignore[arg-type]

    def test_syntax_error_position(self) -> None:
        with pytest.raises(FormulaSyntaxError) as exc_info:
            evaluate_expression("1 + $", {})
        assert exc_info.value.position == 4

    def test_non_finite_result(self) -> None:
        with pytest.raises(FormulaEvaluationError, match="non-finite"):
            evaluate_expression("big * big", {"big": 1e308})

    @pytest.mark.parametrize("function", ["ceil", "floor", "round", "max"])
    def test_overflowing_function_argument(self, function: str) -> None:
        with pytest.raises(FormulaEvaluationError, match="non-finite argument"):
            evaluate_expression(f"{function}(big * 10)", {"big": 1e308})

    def test_overflowing_literal(self) -> None:
        with pytest.raises(FormulaEvaluationError, match="non-finite"):
            evaluate_expression("ceil(1" + "0" * 400 + ")", {})

    def test_deep_nesting_rejected(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="tokens"):
            evaluate_expression("(" * 5000 + "1" + ")" * 5000, {})

    def test_nesting_limit(self) -> None:
        depth = MAX_NESTING + 1
        with pytest.raises(FormulaSyntaxError, match="nests deeper"):
            evaluate_expression("(" * depth + "1" + ")" * depth, {})
        assert evaluate_expression("(" * 10 + "1" + ")" * 10, {}) == 1.0

    def test_unary_chain_limit(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="nests deeper"):
            evaluate_expression("-" * (MAX_NESTING + 1) + "1", {})

    def test_long_flat_sum_rejected(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="tokens"):
            evaluate_expression("1" + " + 1" * MAX_TOKENS, {})

    def test_long_flat_sum_within_limit(self) -> None:
        assert evaluate_expression("1" + " + 1" * 200, {}) == 201.0


class TestReferencedIdentifiers:
    """Static identifier extraction."""

    def test_collects_names(self) -> None:
        names = referenced_identifiers("ceil((lf.ridge + lf.hip) / 33) + -pen.pipe_vent")
        assert names == frozenset({"lf.ridge", "lf.hip", "pen.pipe_vent"})

    def test_function_names_excluded(self) -> None:
        assert referenced_identifiers("max(1, 2)") == frozenset()


class TestFormatNumber:
    """Display formatting."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (66.0, "66"),
            (0.0, "0"),
            (-0.0001, "0"),
            (22.5, "22.5"),
            (22.456, "22.46"),
            (1.1, "1.1"),
            (-3.0, "-3"),
        ],
    )
    def test_format(self, value: float, expected: str) -> None:
        assert format_number(value) == expected

    def test_precision(self) -> None:
        assert format_number(3.14159, precision=4) == "3.1416"
        assert format_number(3.6, precision=0) == "4"


class TestRenderTemplate:
    """Placeholder substitution."""

    def test_renders_placeholders(self) -> None:
        template = "Ridge: {{ ceil((lf.ridge + lf.hip) / 33) }} bundles, {{roof.squares}} sq"
        assert render_template(template, SCALARS) == "Ridge: 2 bundles, 20 sq"

    def test_text_without_placeholders(self) -> None:
        assert render_template("No formulas here.", SCALARS) == "No formulas here."

    def test_one_failure_fails_all(self) -> None:
        with pytest.raises(UnknownIdentifierError):
            render_template("{{ lf.ridge }} and {{ lf.nothing }}", SCALARS)

    def test_negative_precision_rejected(self) -> None:
        with pytest.raises(FormulaEvaluationError, match="precision"):
            render_template("{{ 1 }}", {}, precision=-1)

    def test_against_derived_scalars(self, summary: MeasurementSummary) -> None:
        scalars = derive_materials(summary).scalars
        rendered = render_template(
            "Shingles: {{ bundles.shingles.waste_10pct }} / starter {{ ceil(lf.eave_rake_total / 100) }}",
            scalars,
        )
        assert rendered == "Shingles: 66 / starter 2"

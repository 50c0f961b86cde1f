#!/usr/bin/env python3
"""
End-to-end tests for expression evaluation.

Tests the full tokenize -> parse -> evaluate -> format pipeline through
the public evaluate() entry points.
"""

import pytest

from keypad_calculator import evaluate
from keypad_calculator.engine.pipeline import ExpressionPipeline, evaluate_expression


class TestEvaluate:
    """Canonical results for well-formed expressions."""

    @pytest.mark.parametrize(
        "expression,expected",
        [
            ("2+3×4", "14"),
            ("10-2×3", "4"),
            ("3.5+1.2", "4.7"),
            ("10÷4", "2.5"),
            ("0.1+0.2", "0.3"),
            ("1÷3", "0.333333"),
            ("2^3^2", "512"),
            ("-(4)", "-4"),
            ("5-(3)", "2"),
            ("5--(3)", "8"),
            (".5+.5", "1"),
            ("3.", "3"),
            ("2*3", "6"),
            ("8/2", "4"),
        ],
    )
    def test_arithmetic(self, expression, expected):
        assert evaluate(expression) == expected

    @pytest.mark.parametrize(
        "expression,expected",
        [
            ("50+20%", "50.2"),
            ("20%", "0.2"),
            ("-(20)%", "-0.2"),
            ("(50)%", "0.5"),
        ],
    )
    def test_percent(self, expression, expected):
        assert evaluate(expression) == expected

    @pytest.mark.parametrize(
        "expression,expected",
        [
            ("sqrt(16)", "4"),
            ("(5)!", "120"),
            ("(3)^2", "9"),
            ("log(1000)", "3"),
            ("ln(1)", "0"),
            ("sin(0)", "0"),
            ("sqrt(9)+(3)!", "9"),
            ("(1+2)^2", "9"),
        ],
    )
    def test_functions(self, expression, expected):
        assert evaluate(expression) == expected

    @pytest.mark.parametrize(
        "expression",
        [
            "3..5+2",
            "+×2",
            "",
            "2+",
            "(2+3",
            "5÷0",
            "sqrt(-1)",
            "log(0)",
            "(2.5)!",
            "2$3",
            "sqrt()",
        ],
    )
    def test_invalid(self, expression):
        assert evaluate(expression) == "Invalid"


class TestEvaluateExpression:
    """Typed results carry the failure kind."""

    def test_success(self):
        result = evaluate_expression("2+3")
        assert result.success
        assert result.value == 5.0
        assert result.display == "5"
        assert result.tokens_count == 3
        assert result.ast_nodes_count == 3
        assert result.error_kind is None

    @pytest.mark.parametrize(
        "expression,kind",
        [
            ("", "empty_input"),
            ("(2", "unbalanced_parens"),
            ("2++", "unexpected_token"),
            ("2#", "token"),
            ("5÷0", "domain"),
            ("(171)!", "domain"),
        ],
    )
    def test_error_kinds(self, expression, kind):
        result = evaluate_expression(expression)
        assert not result.success
        assert result.display == "Invalid"
        assert result.error_kind == kind
        assert result.error_message

    def test_never_raises(self):
        for text in ["((((", "))))", "÷÷", "!", "%", "sin", "1e5", "-" * 3000 + "5"]:
            assert evaluate_expression(text).display == "Invalid"

    def test_deep_nesting_is_a_domain_error(self):
        text = "sqrt(" * 1500 + "4" + ")" * 1500
        result = evaluate_expression(text)
        assert not result.success
        assert result.error_kind == "domain"
        assert "nested" in result.error_message

    def test_moderate_nesting_still_evaluates(self):
        assert evaluate("-" * 10 + "5") == "5"


class TestPipelineSettings:
    def test_degrees(self):
        pipeline = ExpressionPipeline(angle_mode="degrees")
        assert pipeline.evaluate("sin(90)") == "1"
        assert pipeline.evaluate("cos(90)") == "0"

    def test_precision(self):
        pipeline = ExpressionPipeline(precision=2)
        assert pipeline.evaluate("1÷3") == "0.33"

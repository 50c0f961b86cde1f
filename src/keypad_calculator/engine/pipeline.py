"""
Expression pipeline: tokenize -> parse -> evaluate -> format.

Failures never escape as exceptions; they come back as an
EvaluationResult with success=False and display "Invalid".
"""

import logging
from typing import Optional

from ..exceptions import CalculatorError, DomainError, ParseError, TokenError
from ..models.ast_schema import ASTValidator, EvaluationResult
from .evaluator import ExpressionEvaluator, RADIANS
from .expression_parser import ExpressionLexer, PrecedenceParser
from .formatter import INVALID, format_result

logger = logging.getLogger(__name__)


class ExpressionPipeline:
    """Runs expression text through every stage and returns a typed result."""

    def __init__(self, precision: int = 6, angle_mode: str = RADIANS):
        self.lexer = ExpressionLexer()
        self.parser = PrecedenceParser()
        self.evaluator = ExpressionEvaluator(angle_mode=angle_mode)
        self.precision = precision

    def evaluate_expression(self, expression: str) -> EvaluationResult:
        """Evaluate expression text and return the full result."""
        tokens_count = 0
        ast_nodes_count = 0
        try:
            tokens = self.lexer.tokenize(expression)
            tokens_count = len(tokens) - 1  # Exclude EOF

            ast_root = self.parser.parse(tokens)
            ast_nodes_count = ASTValidator.count_nodes(ast_root)

            validation_errors = ASTValidator.validate_ast(ast_root)
            if validation_errors:
                raise DomainError("; ".join(validation_errors))

            value = self.evaluator.evaluate(ast_root)
            display = format_result(value, self.precision)
            if display == INVALID:
                raise DomainError(f"Non-finite result: {value}")

            logger.debug(f"Evaluated {expression!r} -> {display}")
            return EvaluationResult(
                success=True,
                expression=expression,
                value=value,
                display=display,
                tokens_count=tokens_count,
                ast_nodes_count=ast_nodes_count,
            )

        except RecursionError:
            # Tree walks are recursive; the parser itself is not
            error = DomainError("Expression is nested too deeply")
            return self._failure(expression, error, tokens_count, ast_nodes_count)

        except CalculatorError as e:
            return self._failure(expression, e, tokens_count, ast_nodes_count)

    def _failure(
        self,
        expression: str,
        error: CalculatorError,
        tokens_count: int,
        ast_nodes_count: int,
    ) -> EvaluationResult:
        logger.debug(f"Evaluation failed for {expression[:80]!r}: {error.message}")
        return EvaluationResult(
            success=False,
            expression=expression,
            display=INVALID,
            error_kind=self._error_kind(error),
            error_message=error.message,
            tokens_count=tokens_count,
            ast_nodes_count=ast_nodes_count,
        )

    def evaluate(self, expression: str) -> str:
        """Evaluate expression text to its canonical display string."""
        return self.evaluate_expression(expression).display

    @staticmethod
    def _error_kind(error: CalculatorError) -> str:
        if isinstance(error, TokenError):
            return "token"
        if isinstance(error, ParseError):
            return error.kind.value
        return "domain"


_default_pipeline: Optional[ExpressionPipeline] = None


def _pipeline() -> ExpressionPipeline:
    global _default_pipeline
    if _default_pipeline is None:
        _default_pipeline = ExpressionPipeline()
    return _default_pipeline


def evaluate_expression(expression: str) -> EvaluationResult:
    """Evaluate with default settings, returning the typed result."""
    return _pipeline().evaluate_expression(expression)


def evaluate(expression: str) -> str:
    """Evaluate with default settings: a formatted numeral or "Invalid"."""
    return _pipeline().evaluate(expression)

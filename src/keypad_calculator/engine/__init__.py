# Expression evaluation pipeline

from .expression_parser import ExpressionLexer, PrecedenceParser
from .evaluator import ExpressionEvaluator
from .formatter import format_result
from .pipeline import ExpressionPipeline, evaluate, evaluate_expression

__all__ = [
    "ExpressionLexer",
    "PrecedenceParser",
    "ExpressionEvaluator",
    "format_result",
    "ExpressionPipeline",
    "evaluate",
    "evaluate_expression",
]

"""
Evaluator - walk a parsed expression tree and compute a float.
"""

import logging
import math
from typing import Callable, Dict

from ..exceptions import DomainError
from ..models.ast_schema import ASTNode, NodeType

logger = logging.getLogger(__name__)

RADIANS = "radians"
DEGREES = "degrees"


class ExpressionEvaluator:
    """Computes the value of an AST.

    Trig functions take their operand in the configured angle unit
    (radians unless told otherwise).
    """

    def __init__(self, angle_mode: str = RADIANS):
        if angle_mode not in (RADIANS, DEGREES):
            raise ValueError(f"angle_mode must be {RADIANS!r} or {DEGREES!r}")
        self.angle_mode = angle_mode

        self.functions: Dict[str, Callable[[float], float]] = {
            "sin": lambda x: math.sin(self._to_radians(x)),
            "cos": lambda x: math.cos(self._to_radians(x)),
            "tan": lambda x: math.tan(self._to_radians(x)),
            "log": self._log10,
            "ln": self._ln,
            "sqrt": self._sqrt,
            "square": lambda x: x * x,
            "factorial": self._factorial,
        }

    def evaluate(self, node: ASTNode) -> float:
        """Evaluate the tree rooted at node.

        Raises:
            DomainError: On an undefined operation or non-finite result
        """
        return self._visit(node)

    def _visit(self, node: ASTNode) -> float:
        if node.node_type == NodeType.LITERAL:
            value = float(node.value)
        elif node.node_type == NodeType.BINARY_OP:
            value = self._binary(node.operator, self._visit(node.left), self._visit(node.right))
        elif node.node_type == NodeType.UNARY_NEGATE:
            value = -self._visit(node.operand)
        elif node.node_type == NodeType.FUNCTION_CALL:
            function = self.functions.get(node.function_name)
            if function is None:
                raise DomainError(f"Unknown function: {node.function_name}")
            value = self._guard(function, self._visit(node.operand))
        elif node.node_type == NodeType.FACTORIAL:
            value = self._factorial(self._visit(node.operand))
        else:
            raise DomainError(f"Unsupported node type: {node.node_type}")

        if not math.isfinite(value):
            raise DomainError(f"Non-finite result in {node.node_type} node")
        return value

    def _binary(self, operator: str, left: float, right: float) -> float:
        if operator == "+":
            return left + right
        if operator == "-":
            return left - right
        if operator == "*":
            return left * right
        if operator == "/":
            if right == 0:
                raise DomainError("Division by zero")
            return left / right
        if operator == "^":
            return self._guard(lambda base: math.pow(base, right), left)
        raise DomainError(f"Unknown operator: {operator}")

    @staticmethod
    def _guard(function: Callable[[float], float], operand: float) -> float:
        """Run a math call, converting library errors into DomainError."""
        try:
            return function(operand)
        except (ValueError, OverflowError, ZeroDivisionError) as e:
            raise DomainError(str(e)) from e

    def _to_radians(self, value: float) -> float:
        if self.angle_mode == DEGREES:
            return math.radians(value)
        return value

    @staticmethod
    def _log10(value: float) -> float:
        if value <= 0:
            raise DomainError("log of a non-positive number")
        return math.log10(value)

    @staticmethod
    def _ln(value: float) -> float:
        if value <= 0:
            raise DomainError("ln of a non-positive number")
        return math.log(value)

    @staticmethod
    def _sqrt(value: float) -> float:
        if value < 0:
            raise DomainError("sqrt of a negative number")
        return math.sqrt(value)

    @staticmethod
    def _factorial(value: float) -> float:
        if value < 0 or not float(value).is_integer():
            raise DomainError("factorial needs a non-negative integer")

        result = 1.0
        for factor in range(2, int(value) + 1):
            result *= factor
            if math.isinf(result):
                raise DomainError("factorial overflow")
        return result

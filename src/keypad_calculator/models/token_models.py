"""
Pydantic models for expression tokenization and operator/function lookup.
Separated from parser logic for better organization.
"""

from enum import Enum
from typing import Optional, Dict
from pydantic import BaseModel, Field, ConfigDict


class TokenType(str, Enum):
    """Token types for lexical analysis."""

    # Literals
    NUMBER = "NUMBER"

    # Binary operators
    PLUS = "PLUS"  # +
    MINUS = "MINUS"  # - or −
    MULTIPLY = "MULTIPLY"  # × or *
    DIVIDE = "DIVIDE"  # ÷ or /
    POWER = "POWER"  # ^

    # Postfix operators
    PERCENT = "PERCENT"  # %
    FACTORIAL = "FACTORIAL"  # !

    # Prefix
    FUNCTION = "FUNCTION"  # sin, cos, tan, log, ln, sqrt, square, factorial
    UNARY_MINUS = "UNARY_MINUS"  # MINUS in prefix position, set by the parser

    # Punctuation
    LEFT_PAREN = "LEFT_PAREN"  # (
    RIGHT_PAREN = "RIGHT_PAREN"  # )

    # Special
    EOF = "EOF"


class Token(BaseModel):
    """Token with type, canonical value, and position in the source text."""

    type: TokenType
    value: str
    position: int

    model_config = ConfigDict(frozen=True)


class SupportedOperator(BaseModel):
    """Registry entry for an operator."""

    symbol: str
    name: str
    precedence: int
    associativity: str = "left"  # "left", "right"
    fixity: str = "infix"  # "infix", "prefix", "postfix"

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "symbol": "+",
                    "name": "addition",
                    "precedence": 1,
                    "associativity": "left",
                    "fixity": "infix",
                }
            ]
        }
    )


class SupportedFunction(BaseModel):
    """Registry entry for a keypad function."""

    name: str
    category: str  # "trigonometric", "logarithmic", "power", "combinatorial"
    notation: str  # how the editor wraps an expression, "{}" is the operand
    description: str = ""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "sqrt",
                    "category": "power",
                    "notation": "sqrt({})",
                    "description": "Square root",
                },
                {
                    "name": "square",
                    "category": "power",
                    "notation": "({})^2",
                    "description": "Square",
                },
            ]
        }
    )

    def render(self, operand: str) -> str:
        """Wrap operand text in this function's notation."""
        return self.notation.format(operand)


class FunctionRegistry(BaseModel):
    """Central registry of all supported functions."""

    functions: Dict[str, SupportedFunction] = Field(default_factory=dict)

    def add_function(self, func: SupportedFunction):
        """Add a function to the registry."""
        self.functions[func.name] = func

    def get_function(self, name: str) -> Optional[SupportedFunction]:
        """Get function info by name."""
        return self.functions.get(name.lower())

    def is_supported(self, name: str) -> bool:
        """Check if function is supported."""
        return name.lower() in self.functions


class OperatorRegistry(BaseModel):
    """Central registry of all supported operators."""

    operators: Dict[str, SupportedOperator] = Field(default_factory=dict)

    def add_operator(self, op: SupportedOperator):
        """Add an operator to the registry."""
        self.operators[op.symbol] = op

    def get_operator(self, symbol: str) -> Optional[SupportedOperator]:
        """Get operator info by symbol."""
        return self.operators.get(symbol)

    def get_precedence(self, symbol: str) -> int:
        """Get operator precedence."""
        op = self.operators.get(symbol)
        return op.precedence if op else 0


# Default registries
def create_default_function_registry() -> FunctionRegistry:
    """Create registry with the keypad's scientific functions."""
    registry = FunctionRegistry()

    functions = [
        SupportedFunction(
            name="sin", category="trigonometric", notation="sin({})", description="Sine"
        ),
        SupportedFunction(
            name="cos",
            category="trigonometric",
            notation="cos({})",
            description="Cosine",
        ),
        SupportedFunction(
            name="tan",
            category="trigonometric",
            notation="tan({})",
            description="Tangent",
        ),
        SupportedFunction(
            name="log",
            category="logarithmic",
            notation="log({})",
            description="Base-10 logarithm",
        ),
        SupportedFunction(
            name="ln",
            category="logarithmic",
            notation="ln({})",
            description="Natural logarithm",
        ),
        SupportedFunction(
            name="sqrt", category="power", notation="sqrt({})", description="Square root"
        ),
        # Rendered with operators rather than a keyword
        SupportedFunction(
            name="square", category="power", notation="({})^2", description="Square"
        ),
        SupportedFunction(
            name="factorial",
            category="combinatorial",
            notation="({})!",
            description="Factorial of a non-negative integer",
        ),
    ]

    for func in functions:
        registry.add_function(func)

    return registry


def create_default_operator_registry() -> OperatorRegistry:
    """Create registry with arithmetic operators, highest precedence last."""
    registry = OperatorRegistry()

    operators = [
        SupportedOperator(symbol="+", name="addition", precedence=1),
        SupportedOperator(symbol="-", name="subtraction", precedence=1),
        SupportedOperator(symbol="*", name="multiplication", precedence=2),
        SupportedOperator(symbol="/", name="division", precedence=2),
        SupportedOperator(
            symbol="^", name="power", precedence=3, associativity="right"
        ),
        SupportedOperator(
            symbol="neg",
            name="unary_minus",
            precedence=4,
            associativity="right",
            fixity="prefix",
        ),
        SupportedOperator(
            symbol="!", name="factorial", precedence=5, fixity="postfix"
        ),
        SupportedOperator(symbol="%", name="percent", precedence=5, fixity="postfix"),
    ]

    for op in operators:
        registry.add_operator(op)

    return registry


# Export all models
__all__ = [
    "TokenType",
    "Token",
    "SupportedOperator",
    "SupportedFunction",
    "FunctionRegistry",
    "OperatorRegistry",
    "create_default_function_registry",
    "create_default_operator_registry",
]

"""
Error taxonomy for the expression pipeline.

Every stage raises one of these; the pipeline catches them once and
collapses them to the single outward result "Invalid".
"""

from enum import Enum
from typing import Optional


class CalculatorError(Exception):
    """Base class for all pipeline failures."""

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.position = position


class TokenError(CalculatorError):
    """Unrecognized character in the expression text."""


class ParseErrorKind(str, Enum):
    UNBALANCED_PARENS = "unbalanced_parens"
    UNEXPECTED_TOKEN = "unexpected_token"
    EMPTY_INPUT = "empty_input"


class ParseError(CalculatorError):
    """Malformed token sequence."""

    def __init__(
        self, kind: ParseErrorKind, message: str, position: Optional[int] = None
    ):
        super().__init__(message, position)
        self.kind = kind


class DomainError(CalculatorError):
    """Mathematically undefined operation or non-finite result."""


__all__ = [
    "CalculatorError",
    "TokenError",
    "ParseErrorKind",
    "ParseError",
    "DomainError",
]

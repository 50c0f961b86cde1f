"""Keypad Calculator.

An incremental expression editor driven by keypad presses, backed by a
tokenizer / precedence parser / evaluator pipeline that returns typed
results instead of raising.
"""

from keypad_calculator.core.editor import ExpressionEditor
from keypad_calculator.core.handler_registry import KeyHandlerRegistry
from keypad_calculator.core.preferences import ThemePreference
from keypad_calculator.engine.pipeline import ExpressionPipeline, evaluate
from keypad_calculator.exceptions import (
    CalculatorError,
    DomainError,
    ParseError,
    TokenError,
)
from keypad_calculator.models.editor_models import KeyKind, PressToken
from keypad_calculator.storage.key_value_store import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
)

# Version
__version__ = "0.1.0"

# Public API
__all__ = [
    # Editor
    "ExpressionEditor",
    "KeyHandlerRegistry",
    "KeyKind",
    "PressToken",
    "ThemePreference",
    # Evaluation
    "ExpressionPipeline",
    "evaluate",
    # Errors
    "CalculatorError",
    "TokenError",
    "ParseError",
    "DomainError",
    # Persistence
    "KeyValueStore",
    "InMemoryStore",
    "JsonFileStore",
    # Version
    "__version__",
]

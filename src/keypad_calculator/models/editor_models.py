"""
Pydantic models for keypad input and editor state.
"""

from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict, model_validator


class KeyKind(str, Enum):
    """Kinds of key press the editor accepts."""

    DIGIT = "digit"
    DECIMAL_POINT = "decimal_point"
    OPERATOR = "operator"
    PERCENT = "percent"
    PARENTHESIS = "parenthesis"
    TOGGLE_SIGN = "toggle_sign"
    BACKSPACE = "backspace"
    CLEAR_ENTRY = "clear_entry"
    CLEAR_ALL = "clear_all"
    FUNCTION = "function"
    EQUALS = "equals"
    MEMORY_CLEAR = "memory_clear"
    MEMORY_RECALL = "memory_recall"
    MEMORY_ADD = "memory_add"
    MEMORY_SUBTRACT = "memory_subtract"
    UNDO = "undo"
    REDO = "redo"


# Display glyphs stored in the expression text, keyed by accepted aliases
OPERATOR_GLYPHS = {
    "+": "+",
    "-": "-",
    "−": "-",
    "×": "×",
    "*": "×",
    "x": "×",
    "÷": "÷",
    "/": "÷",
}

FUNCTION_NAMES = ("sin", "cos", "tan", "log", "ln", "sqrt", "square", "factorial")

FUNCTION_ALIASES = {
    "√": "sqrt",
    "x²": "square",
    "x^2": "square",
    "n!": "factorial",
    "x!": "factorial",
}

# Keypad labels that map onto a kind with no value
LABEL_KINDS = {
    ".": KeyKind.DECIMAL_POINT,
    "%": KeyKind.PERCENT,
    "+/-": KeyKind.TOGGLE_SIGN,
    "±": KeyKind.TOGGLE_SIGN,
    "⌫": KeyKind.BACKSPACE,
    "bs": KeyKind.BACKSPACE,
    "backspace": KeyKind.BACKSPACE,
    "ce": KeyKind.CLEAR_ENTRY,
    "c": KeyKind.CLEAR_ALL,
    "ac": KeyKind.CLEAR_ALL,
    "=": KeyKind.EQUALS,
    "mc": KeyKind.MEMORY_CLEAR,
    "mr": KeyKind.MEMORY_RECALL,
    "m+": KeyKind.MEMORY_ADD,
    "m-": KeyKind.MEMORY_SUBTRACT,
    "undo": KeyKind.UNDO,
    "redo": KeyKind.REDO,
}


class PressToken(BaseModel):
    """A single key press."""

    kind: KeyKind
    value: Optional[str] = None

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    @model_validator(mode="before")
    @classmethod
    def normalize_value(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("value") is not None:
            kind = data.get("kind")
            value = str(data["value"])
            if kind in (KeyKind.OPERATOR, KeyKind.OPERATOR.value):
                value = OPERATOR_GLYPHS.get(value, value)
            elif kind in (KeyKind.FUNCTION, KeyKind.FUNCTION.value):
                value = FUNCTION_ALIASES.get(value, value.lower())
            data = {**data, "value": value}
        return data

    @model_validator(mode="after")
    def check_value(self) -> "PressToken":
        if self.kind == KeyKind.DIGIT:
            if self.value is None or len(self.value) != 1 or not self.value.isdigit():
                raise ValueError(f"Digit key needs a single digit, got {self.value!r}")
        elif self.kind == KeyKind.OPERATOR:
            if self.value not in ("+", "-", "×", "÷"):
                raise ValueError(f"Unsupported operator: {self.value!r}")
        elif self.kind == KeyKind.PARENTHESIS:
            if self.value not in ("(", ")"):
                raise ValueError(f"Parenthesis key needs '(' or ')', got {self.value!r}")
        elif self.kind == KeyKind.FUNCTION:
            if self.value not in FUNCTION_NAMES:
                raise ValueError(f"Unsupported function: {self.value!r}")
        return self

    # Convenience constructors
    @classmethod
    def digit(cls, digit: str) -> "PressToken":
        return cls(kind=KeyKind.DIGIT, value=str(digit))

    @classmethod
    def operator(cls, symbol: str) -> "PressToken":
        return cls(kind=KeyKind.OPERATOR, value=symbol)

    @classmethod
    def paren(cls, symbol: str) -> "PressToken":
        return cls(kind=KeyKind.PARENTHESIS, value=symbol)

    @classmethod
    def function(cls, name: str) -> "PressToken":
        return cls(kind=KeyKind.FUNCTION, value=name)

    @classmethod
    def of(cls, kind: KeyKind) -> "PressToken":
        return cls(kind=kind)

    @classmethod
    def from_label(cls, label: str) -> "PressToken":
        """Map a keypad label such as "7", "×", "+/-" or "MR" to a token.

        Raises:
            ValueError: If the label is not a known key
        """
        label = label.strip()
        if len(label) == 1 and label.isdigit():
            return cls.digit(label)
        if label in OPERATOR_GLYPHS:
            return cls.operator(label)
        if label in ("(", ")"):
            return cls.paren(label)

        lowered = label.lower()
        if lowered in LABEL_KINDS:
            return cls.of(LABEL_KINDS[lowered])
        if label in FUNCTION_ALIASES or lowered in FUNCTION_NAMES:
            return cls.function(label)

        raise ValueError(f"Unknown key label: {label!r}")


class HistoryEntry(BaseModel):
    """One committed calculation."""

    expression: str
    result: str

    model_config = ConfigDict(frozen=True)

    SEPARATOR: ClassVar[str] = " = "

    def serialize(self) -> str:
        return f"{self.expression}{self.SEPARATOR}{self.result}"

    @classmethod
    def parse(cls, text: str) -> Optional["HistoryEntry"]:
        """Parse a stored "<expression> = <result>" line, None if malformed."""
        if cls.SEPARATOR not in text:
            return None
        expression, result = text.rsplit(cls.SEPARATOR, 1)
        return cls(expression=expression, result=result)


class EditorState(BaseModel):
    """Single source of truth for one calculator session."""

    expression_text: str = ""
    last_result: str = ""
    just_evaluated: bool = False
    memory: Optional[float] = None

    history_entries: List[HistoryEntry] = Field(default_factory=list)  # newest first
    undo_stack: List[str] = Field(default_factory=list)
    redo_stack: List[str] = Field(default_factory=list)

    model_config = ConfigDict(validate_assignment=True)


class DisplaySnapshot(BaseModel):
    """What a front end shows after a key press."""

    expression: str
    result: str
    preview: Optional[str] = None
    memory_set: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return self.model_dump()


__all__ = [
    "KeyKind",
    "PressToken",
    "HistoryEntry",
    "EditorState",
    "DisplaySnapshot",
    "OPERATOR_GLYPHS",
    "FUNCTION_NAMES",
]

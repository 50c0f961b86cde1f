"""
Segment model for the expression text.

A segment is the maximal run of digits and decimal points at the end of
the text. The editor locates it by scanning backwards from the end
instead of splitting on operator patterns, so nested parentheses and
sign wrappers are handled explicitly.
"""

from dataclasses import dataclass
from typing import Optional

NUMERIC_CHARS = frozenset("0123456789.")
OPERATOR_CHARS = frozenset("+-×÷^")

# Operand forms recognized by trailing_operand()
PLAIN = "plain"  # 12.5
NEGATED = "negated"  # -12.5 (bare sign in unary position)
WRAPPED = "wrapped"  # -(12.5)


@dataclass(frozen=True)
class Segment:
    """A numeric run inside the expression text."""

    start: int
    end: int
    text: str

    @property
    def is_empty(self) -> bool:
        return not self.text

    @property
    def has_point(self) -> bool:
        return "." in self.text

    @property
    def has_digit(self) -> bool:
        return any(ch.isdigit() for ch in self.text)

    @property
    def value(self) -> float:
        if not self.has_digit:
            return 0.0
        try:
            return float(self.text)
        except ValueError:
            # More than one point
            return float("nan")

    @property
    def is_zero(self) -> bool:
        return self.value == 0


@dataclass(frozen=True)
class TrailingOperand:
    """The last operand of the text, including any sign wrapper."""

    start: int
    end: int
    segment: Segment
    form: str

    def toggled(self, text: str) -> str:
        """Return text with this operand's sign flipped."""
        digits = self.segment.text
        if self.form in (WRAPPED, NEGATED):
            replacement = digits
        else:
            replacement = f"-({digits})"
        return text[: self.start] + replacement + text[self.end :]


def current_segment(text: str, end: Optional[int] = None) -> Segment:
    """Segment ending at end (default: end of text); may be empty."""
    if end is None:
        end = len(text)
    start = end
    while start > 0 and text[start - 1] in NUMERIC_CHARS:
        start -= 1
    return Segment(start=start, end=end, text=text[start:end])


def is_unary_position(text: str, index: int) -> bool:
    """Whether a '-' at index is a sign rather than a subtraction."""
    if index == 0:
        return True
    previous = text[index - 1]
    return previous in OPERATOR_CHARS or previous == "("


def trailing_operand(text: str) -> Optional[TrailingOperand]:
    """Locate the operand at the end of text, or None if there is none."""
    if text.endswith(")"):
        inner = current_segment(text, len(text) - 1)
        sign_index = inner.start - 2
        if (
            inner.has_digit
            and text[: inner.start].endswith("-(")
            and is_unary_position(text, sign_index)
        ):
            return TrailingOperand(
                start=sign_index, end=len(text), segment=inner, form=WRAPPED
            )
        # "5-(3)" is a subtraction of a parenthesized group
        return None

    segment = current_segment(text)
    if not segment.has_digit:
        return None

    sign_index = segment.start - 1
    if sign_index >= 0 and text[sign_index] == "-" and is_unary_position(text, sign_index):
        return TrailingOperand(
            start=sign_index, end=segment.end, segment=segment, form=NEGATED
        )
    return TrailingOperand(
        start=segment.start, end=segment.end, segment=segment, form=PLAIN
    )


def toggle_sign(text: str) -> Optional[str]:
    """Flip the sign of the trailing operand.

    Returns None when there is no operand or it normalizes to zero.
    """
    operand = trailing_operand(text)
    if operand is None or operand.segment.is_zero:
        return None
    return operand.toggled(text)

"""Canonical display formatting for evaluated results."""

import math
from decimal import Decimal

INVALID = "Invalid"


def format_result(value: float, precision: int = 6) -> str:
    """Render value with fixed precision, then strip trailing zeros and point.

    4.0 -> "4", 2.5 -> "2.5"; non-finite values map to "Invalid".
    """
    if value is None or not math.isfinite(value):
        return INVALID

    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")

    # Tiny negatives round to "-0"
    if text == "-0":
        text = "0"
    return text


def shortest_decimal(value: float) -> str:
    """Shortest round-tripping decimal text, integers without ".0".

    Exponent forms are expanded positionally so the lexer can read them
    back: 5.55e-17 -> "0.0000000000000000555".

    Raises:
        ValueError: If value is not finite
    """
    if not math.isfinite(value):
        raise ValueError(f"No decimal form for {value}")
    if float(value).is_integer() and abs(value) < 1e16:
        return str(int(value))

    text = repr(float(value))
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
    return text

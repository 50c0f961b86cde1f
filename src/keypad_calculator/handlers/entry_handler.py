"""Handlers for keys that type into the expression."""

import logging

from keypad_calculator.core.segments import current_segment
from keypad_calculator.handlers.base_handler import BaseKeyHandler
from keypad_calculator.models.editor_models import KeyKind, PressToken

logger = logging.getLogger(__name__)

# Characters a "%" may follow
PERCENT_ANCHORS = frozenset("0123456789.)")


class DigitHandler(BaseKeyHandler):
    """Appends digits, suppressing redundant leading zeros."""

    kinds = (KeyKind.DIGIT,)

    def apply(self, editor, token: PressToken) -> None:
        state = editor.state
        digit = token.value

        if state.just_evaluated:
            self.start_fresh(state, digit)
            return

        text = state.expression_text
        segment = current_segment(text)
        if segment.text == "0":
            if digit == "0":
                return
            # "0" followed by 1-9 becomes that digit
            state.expression_text = text[:-1] + digit
            return

        state.expression_text = text + digit


class DecimalPointHandler(BaseKeyHandler):
    """Appends a point unless the current segment already has one."""

    kinds = (KeyKind.DECIMAL_POINT,)

    def apply(self, editor, token: PressToken) -> None:
        state = editor.state

        if state.just_evaluated:
            self.start_fresh(state, "0.")
            return

        if current_segment(state.expression_text).has_point:
            logger.debug("Ignoring second decimal point in segment")
            return

        state.expression_text += "."


class OperatorHandler(BaseKeyHandler):
    """Appends binary operators and parentheses.

    After "=", the key continues from the previous result.
    """

    kinds = (KeyKind.OPERATOR, KeyKind.PARENTHESIS)

    def apply(self, editor, token: PressToken) -> None:
        state = editor.state
        if state.just_evaluated:
            self.continue_from_result(state, token.value)
            return
        state.expression_text += token.value


class PercentHandler(BaseKeyHandler):
    kinds = (KeyKind.PERCENT,)

    def apply(self, editor, token: PressToken) -> None:
        state = editor.state
        if state.just_evaluated:
            self.continue_from_result(state, "%")
            return

        text = state.expression_text
        if text and text[-1] in PERCENT_ANCHORS:
            state.expression_text = text + "%"

import logging

from keypad_calculator.core.segments import toggle_sign
from keypad_calculator.handlers.base_handler import BaseKeyHandler
from keypad_calculator.models.editor_models import KeyKind, PressToken

logger = logging.getLogger(__name__)


class ToggleSignHandler(BaseKeyHandler):
    """Flips the sign of the trailing operand.

    "4" -> "-(4)" -> "4"; a bare unary "-5" becomes "5". Operands that
    normalize to zero are left alone.
    """

    kinds = (KeyKind.TOGGLE_SIGN,)

    def apply(self, editor, token: PressToken) -> None:
        state = editor.state
        source = state.last_result if state.just_evaluated else state.expression_text

        toggled = toggle_sign(source)
        if toggled is None:
            logger.debug(f"No operand to toggle in {source!r}")
            return

        if state.just_evaluated:
            self.start_fresh(state, toggled)
        else:
            state.expression_text = toggled

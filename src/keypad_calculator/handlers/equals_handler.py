import logging

from keypad_calculator.engine.formatter import INVALID
from keypad_calculator.handlers.base_handler import BaseKeyHandler
from keypad_calculator.models.editor_models import KeyKind, PressToken

logger = logging.getLogger(__name__)


class EqualsHandler(BaseKeyHandler):
    """Evaluates the expression and commits the result to history."""

    kinds = (KeyKind.EQUALS,)

    def apply(self, editor, token: PressToken) -> None:
        state = editor.state
        expression = state.expression_text
        result = editor.pipeline.evaluate_expression(expression)

        if not result.success:
            logger.info(
                f"Could not evaluate {expression!r}: "
                f"{result.error_kind} ({result.error_message})"
            )
            state.last_result = INVALID
            state.just_evaluated = False
            return

        state.last_result = result.display
        state.just_evaluated = True
        editor.history_manager.record(state, expression, result.display)

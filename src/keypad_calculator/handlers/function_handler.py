import logging

from keypad_calculator.handlers.base_handler import BaseKeyHandler
from keypad_calculator.models.editor_models import KeyKind, PressToken

logger = logging.getLogger(__name__)


class FunctionHandler(BaseKeyHandler):
    """Wraps the whole expression in a function's notation.

    The wrapped text is not evaluated until "=" is pressed.
    """

    kinds = (KeyKind.FUNCTION,)

    def apply(self, editor, token: PressToken) -> None:
        state = editor.state
        function = editor.function_registry.get_function(token.value)
        if function is None:
            logger.warning(f"Function not in registry: {token.value}")
            return

        if state.just_evaluated:
            self.start_fresh(state, function.render(state.last_result))
            return

        operand = state.expression_text or "0"
        state.expression_text = function.render(operand)

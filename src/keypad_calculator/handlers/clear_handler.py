from keypad_calculator.handlers.base_handler import BaseKeyHandler
from keypad_calculator.models.editor_models import KeyKind, PressToken


class BackspaceHandler(BaseKeyHandler):
    """Deletes the last character.

    On a completely empty display this performs a full reset instead,
    which also zeroes memory and clears history.
    """

    kinds = (KeyKind.BACKSPACE,)

    def apply(self, editor, token: PressToken) -> None:
        state = editor.state
        if not state.expression_text and not state.last_result:
            editor.reset()
            return

        state.expression_text = state.expression_text[:-1]
        state.just_evaluated = False


class ClearHandler(BaseKeyHandler):
    kinds = (KeyKind.CLEAR_ENTRY, KeyKind.CLEAR_ALL)

    def apply(self, editor, token: PressToken) -> None:
        state = editor.state
        state.expression_text = ""
        state.last_result = ""
        state.just_evaluated = False

from keypad_calculator.handlers.base_handler import BaseKeyHandler
from keypad_calculator.models.editor_models import KeyKind, PressToken


class UndoRedoHandler(BaseKeyHandler):
    kinds = (KeyKind.UNDO, KeyKind.REDO)

    def apply(self, editor, token: PressToken) -> None:
        if token.kind == KeyKind.UNDO:
            editor.undo_manager.undo(editor.state)
        else:
            editor.undo_manager.redo(editor.state)

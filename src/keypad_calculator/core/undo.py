from keypad_calculator.models.editor_models import EditorState


class UndoManager:
    """Bounded undo/redo over expression text snapshots."""

    def __init__(self, limit: int = 100):
        self.limit = limit

    def record(self, state: EditorState, previous_text: str) -> None:
        """Remember the pre-edit text after an edit changed the expression."""
        undo_stack = list(state.undo_stack)
        if not undo_stack or undo_stack[-1] != previous_text:
            undo_stack.append(previous_text)
            # Oldest snapshots go first
            if len(undo_stack) > self.limit:
                undo_stack = undo_stack[-self.limit :]
        state.undo_stack = undo_stack
        state.redo_stack = []

    def undo(self, state: EditorState) -> bool:
        if not state.undo_stack:
            return False
        undo_stack = list(state.undo_stack)
        restored = undo_stack.pop()
        state.undo_stack = undo_stack
        state.redo_stack = state.redo_stack + [state.expression_text]
        self._restore(state, restored)
        return True

    def redo(self, state: EditorState) -> bool:
        if not state.redo_stack:
            return False
        redo_stack = list(state.redo_stack)
        restored = redo_stack.pop()
        state.redo_stack = redo_stack
        state.undo_stack = state.undo_stack + [state.expression_text]
        self._restore(state, restored)
        return True

    @staticmethod
    def _restore(state: EditorState, text: str) -> None:
        state.expression_text = text
        state.last_result = ""
        state.just_evaluated = False

    def clear(self, state: EditorState) -> None:
        state.undo_stack = []
        state.redo_stack = []

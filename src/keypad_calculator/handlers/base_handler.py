from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Tuple

from keypad_calculator.models.editor_models import EditorState, KeyKind, PressToken

if TYPE_CHECKING:
    from keypad_calculator.core.editor import ExpressionEditor


class BaseKeyHandler(ABC):
    """Base class for all key press handlers.

    Each handler is responsible for:
    1. Determining if it can handle a key press
    2. Applying the press to the editor state

    Handlers never raise for presses that would break the expression;
    those are silent no-ops.
    """

    # Key kinds this handler accepts
    kinds: Tuple[KeyKind, ...] = ()

    def can_handle(self, token: PressToken) -> float:
        """Determine if this handler can process the key press.

        Returns:
            float: Confidence score between 0.0 and 1.0
            0.0 = cannot handle
            1.0 = handles this key kind
        """
        return 1.0 if token.kind in self.kinds else 0.0

    def process(self, editor: "ExpressionEditor", token: PressToken) -> None:
        """Apply a key press to the editor.

        Template method; subclasses implement apply().

        Raises:
            ValueError: If this handler cannot process the key
        """
        if self.can_handle(token) == 0.0:
            raise ValueError(
                f"Handler {self.__class__.__name__} cannot process key {token.kind}"
            )
        self.apply(editor, token)

    @abstractmethod
    def apply(self, editor: "ExpressionEditor", token: PressToken) -> None:
        """Mutate editor.state for this key press."""
        pass

    @staticmethod
    def continue_from_result(state: EditorState, suffix: str = "") -> None:
        """Start a new expression from the last result after "="."""
        state.expression_text = state.last_result + suffix
        state.last_result = ""
        state.just_evaluated = False

    @staticmethod
    def start_fresh(state: EditorState, text: str) -> None:
        """Replace the expression after "=" and drop the old result."""
        state.expression_text = text
        state.last_result = ""
        state.just_evaluated = False

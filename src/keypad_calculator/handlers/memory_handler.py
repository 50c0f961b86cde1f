import logging
import math

from keypad_calculator.core.segments import current_segment, trailing_operand
from keypad_calculator.engine.formatter import shortest_decimal
from keypad_calculator.handlers.base_handler import BaseKeyHandler
from keypad_calculator.models.editor_models import EditorState, KeyKind, PressToken

logger = logging.getLogger(__name__)

CLOSED_OPERAND_CHARS = frozenset(")%!")


class MemoryHandler(BaseKeyHandler):
    """MC, MR, M+ and M- keys."""

    kinds = (
        KeyKind.MEMORY_CLEAR,
        KeyKind.MEMORY_RECALL,
        KeyKind.MEMORY_ADD,
        KeyKind.MEMORY_SUBTRACT,
    )

    def apply(self, editor, token: PressToken) -> None:
        state = editor.state
        memory = editor.memory_manager

        if token.kind == KeyKind.MEMORY_CLEAR:
            memory.clear(state)
            logger.info("Memory cleared")

        elif token.kind == KeyKind.MEMORY_RECALL:
            self.recall(state)

        else:
            try:
                amount = float(state.last_result)
            except ValueError:
                logger.debug(f"No numeric result for {token.kind}: {state.last_result!r}")
                return

            if token.kind == KeyKind.MEMORY_ADD:
                memory.add(state, amount)
                logger.info(f"Added {amount} to memory")
            else:
                memory.subtract(state, amount)
                logger.info(f"Subtracted {amount} from memory")

    def recall(self, state: EditorState) -> None:
        """Insert the memory value as the last operand.

        A trailing number is replaced rather than extended; after ")",
        "%" or "!" there is no operand slot and the press is a no-op.
        """
        if state.memory is None:
            return
        if not math.isfinite(state.memory):
            logger.warning(f"Cannot recall non-finite memory value {state.memory}")
            return

        recalled = shortest_decimal(state.memory)
        if state.memory < 0:
            recalled = f"-({recalled[1:]})"

        if state.just_evaluated:
            self.start_fresh(state, recalled)
            return

        text = state.expression_text
        if text and text[-1] in CLOSED_OPERAND_CHARS:
            return

        start = current_segment(text).start
        operand = trailing_operand(text)
        if operand is not None:
            start = operand.start
        state.expression_text = text[:start] + recalled

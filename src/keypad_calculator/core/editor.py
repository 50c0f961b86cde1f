import logging
from typing import Iterable, List, Optional

from keypad_calculator.config.settings import CalculatorSettings
from keypad_calculator.core.handler_registry import KeyHandlerRegistry
from keypad_calculator.core.history import HistoryManager
from keypad_calculator.core.memory import MemoryManager
from keypad_calculator.core.undo import UndoManager
from keypad_calculator.engine.pipeline import ExpressionPipeline
from keypad_calculator.handlers.base_handler import BaseKeyHandler
from keypad_calculator.handlers.clear_handler import BackspaceHandler, ClearHandler
from keypad_calculator.handlers.entry_handler import (
    DecimalPointHandler,
    DigitHandler,
    OperatorHandler,
    PercentHandler,
)
from keypad_calculator.handlers.equals_handler import EqualsHandler
from keypad_calculator.handlers.function_handler import FunctionHandler
from keypad_calculator.handlers.memory_handler import MemoryHandler
from keypad_calculator.handlers.sign_handler import ToggleSignHandler
from keypad_calculator.handlers.undo_handler import UndoRedoHandler
from keypad_calculator.models.editor_models import (
    DisplaySnapshot,
    EditorState,
    KeyKind,
    PressToken,
)
from keypad_calculator.models.token_models import create_default_function_registry
from keypad_calculator.storage.key_value_store import InMemoryStore, KeyValueStore

# Presses that move between snapshots instead of creating one
HISTORY_NAVIGATION_KINDS = (KeyKind.UNDO, KeyKind.REDO)


class ExpressionEditor:
    """Incremental expression editor driven by key presses.

    Owns one EditorState and routes every press through the handler
    registry:
    1. Pick the handler for the key
    2. Let it mutate the state (invalid presses are no-ops)
    3. Record an undo snapshot if the expression text changed

    Memory and history are rehydrated from the store on construction and
    written back after every change that touches them.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        settings: Optional[CalculatorSettings] = None,
    ):
        """Initialize the editor.

        Args:
            store: Persistence backend (default: a fresh InMemoryStore)
            settings: Calculator settings (default: built-in defaults)
        """
        self.logger = logging.getLogger(__name__)
        self.settings = settings if settings is not None else CalculatorSettings()
        self.store = store if store is not None else InMemoryStore()

        self.pipeline = ExpressionPipeline(
            precision=self.settings.precision, angle_mode=self.settings.angle_mode
        )
        self.function_registry = create_default_function_registry()

        self.memory_manager = MemoryManager(self.store, self.settings.memory_key)
        self.history_manager = HistoryManager(
            self.store, self.settings.history_key, self.settings.history_limit
        )
        self.undo_manager = UndoManager(self.settings.undo_limit)

        self.state = EditorState(
            memory=self.memory_manager.load(),
            history_entries=self.history_manager.load(),
        )

        self.handler_registry = KeyHandlerRegistry()
        self.register_handler(DigitHandler(), priority=1)
        self.register_handler(DecimalPointHandler(), priority=2)
        self.register_handler(OperatorHandler(), priority=3)
        self.register_handler(PercentHandler(), priority=4)
        self.register_handler(ToggleSignHandler(), priority=5)
        self.register_handler(FunctionHandler(), priority=6)
        self.register_handler(EqualsHandler(), priority=7)
        self.register_handler(BackspaceHandler(), priority=8)
        self.register_handler(ClearHandler(), priority=9)
        self.register_handler(MemoryHandler(), priority=10)
        self.register_handler(UndoRedoHandler(), priority=11)

        self.logger.debug(
            f"Editor ready: memory={self.state.memory}, "
            f"{len(self.state.history_entries)} history entries"
        )

    def register_handler(self, handler: BaseKeyHandler, priority: int = 100) -> None:
        """Register a handler with the editor.

        Args:
            handler: Handler instance to register
            priority: Priority level (lower = higher priority)
        """
        self.handler_registry.register_handler(handler, priority)

    def press(self, token: PressToken) -> None:
        """Apply one key press to the editor state."""
        handler = self.handler_registry.get_handler(token)
        if handler is None:
            self.logger.warning(f"No handler registered for key {token.kind}")
            return

        before = self.state.expression_text
        handler.process(self, token)

        if (
            token.kind not in HISTORY_NAVIGATION_KINDS
            and self.state.expression_text != before
        ):
            self.undo_manager.record(self.state, before)

    def press_label(self, label: str) -> None:
        """Press the key with the given keypad label ("7", "×", "MR", ...).

        Raises:
            ValueError: If the label is not a known key
        """
        self.press(PressToken.from_label(label))

    def press_sequence(self, labels: Iterable[str]) -> None:
        for label in labels:
            self.press_label(label)

    @property
    def expression(self) -> str:
        return self.state.expression_text

    @property
    def result(self) -> str:
        return self.state.last_result

    @property
    def memory(self) -> Optional[float]:
        return self.state.memory

    @property
    def history(self) -> List[str]:
        """History lines, newest first, as "<expression> = <result>"."""
        return [entry.serialize() for entry in self.state.history_entries]

    @property
    def live_preview(self) -> Optional[str]:
        """Result of the in-progress expression, None if it does not evaluate."""
        text = self.state.expression_text
        if not text or self.state.just_evaluated:
            return None

        result = self.pipeline.evaluate_expression(text)
        return result.display if result.success else None

    def snapshot(self) -> DisplaySnapshot:
        return DisplaySnapshot(
            expression=self.state.expression_text,
            result=self.state.last_result,
            preview=self.live_preview,
            memory_set=bool(self.state.memory),
        )

    def clear_history(self) -> None:
        self.history_manager.clear(self.state)
        self.logger.info("History cleared")

    def reset(self) -> None:
        """Full reset: display, memory, history and undo/redo."""
        self.state.expression_text = ""
        self.state.last_result = ""
        self.state.just_evaluated = False
        self.memory_manager.clear(self.state)
        self.history_manager.clear(self.state)
        self.undo_manager.clear(self.state)
        self.logger.info("Calculator reset")

    def flush(self) -> None:
        """Write memory and history to the store."""
        self.memory_manager.save(self.state.memory)
        self.history_manager.save(self.state.history_entries)

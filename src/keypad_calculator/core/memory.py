import logging
from typing import Optional

from keypad_calculator.models.editor_models import EditorState
from keypad_calculator.storage.key_value_store import KeyValueStore, persist

logger = logging.getLogger(__name__)


class MemoryManager:
    """Memory register (MC / MR / M+ / M-) backed by the key-value store."""

    def __init__(self, store: KeyValueStore, key: str = "memory_value"):
        self.store = store
        self.key = key

    def load(self) -> Optional[float]:
        try:
            return self.store.load_double(self.key)
        except Exception as e:
            logger.warning(f"Failed to load memory value: {e}")
            return None

    def save(self, value: Optional[float]) -> None:
        if value is None:
            persist(self.store.remove, self.key, description="memory value")
        else:
            persist(self.store.save_double, self.key, value, description="memory value")

    def clear(self, state: EditorState) -> None:
        state.memory = 0.0
        self.save(state.memory)

    def add(self, state: EditorState, amount: float) -> None:
        state.memory = (state.memory or 0.0) + amount
        self.save(state.memory)

    def subtract(self, state: EditorState, amount: float) -> None:
        state.memory = (state.memory or 0.0) - amount
        self.save(state.memory)

import logging
from typing import List

from keypad_calculator.models.editor_models import EditorState, HistoryEntry
from keypad_calculator.storage.key_value_store import KeyValueStore, persist

logger = logging.getLogger(__name__)


class HistoryManager:
    """Most-recent-first calculation history, capped and persisted.

    Entries are stored as "<expression> = <result>" strings.
    """

    def __init__(self, store: KeyValueStore, key: str = "calc_history", limit: int = 20):
        self.store = store
        self.key = key
        self.limit = limit

    def load(self) -> List[HistoryEntry]:
        """Load stored entries, skipping any line that does not parse."""
        try:
            lines = self.store.load_string_list(self.key)
        except Exception as e:
            logger.warning(f"Failed to load history: {e}")
            return []

        entries = []
        for line in lines:
            entry = HistoryEntry.parse(line)
            if entry is None:
                logger.warning(f"Skipping malformed history line: {line!r}")
                continue
            entries.append(entry)
        return entries[: self.limit]

    def save(self, entries: List[HistoryEntry]) -> None:
        persist(
            self.store.save_string_list,
            self.key,
            [entry.serialize() for entry in entries],
            description="history",
        )

    def record(self, state: EditorState, expression: str, result: str) -> None:
        """Prepend a committed calculation, trimming to the limit."""
        entries = [HistoryEntry(expression=expression, result=result)]
        entries.extend(state.history_entries)
        state.history_entries = entries[: self.limit]
        self.save(state.history_entries)

    def clear(self, state: EditorState) -> None:
        state.history_entries = []
        self.save(state.history_entries)

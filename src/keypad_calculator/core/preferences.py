import logging

from keypad_calculator.storage.key_value_store import KeyValueStore, persist

logger = logging.getLogger(__name__)

THEME_MODES = ("light", "dark", "system")


class ThemePreference:
    """Persisted light/dark/system theme choice.

    Rendering is left to the front end; this only tracks and stores the mode.
    """

    def __init__(self, store: KeyValueStore, key: str = "theme_mode"):
        self.store = store
        self.key = key
        self.mode = self.load()

    def load(self) -> str:
        try:
            stored = self.store.load_string(self.key)
        except Exception as e:
            logger.warning(f"Failed to load theme preference: {e}")
            return "system"

        if stored not in THEME_MODES:
            return "system"
        return stored

    def set(self, mode: str) -> None:
        if mode not in THEME_MODES:
            raise ValueError(f"Unknown theme mode: {mode!r}")
        self.mode = mode
        persist(self.store.save_string, self.key, mode, description="theme")

    def toggle(self) -> str:
        """Switch light to dark; anything else (dark or system) to light."""
        self.set("dark" if self.mode == "light" else "light")
        return self.mode

    @property
    def is_dark(self) -> bool:
        return self.mode == "dark"

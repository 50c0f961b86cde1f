"""
Key-value persistence for history, memory and theme preference.

The editor only talks to the KeyValueStore interface. Writes are
fire-and-forget from the editor's point of view: see persist().
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Narrow load/save interface the calculator core depends on."""

    @abstractmethod
    def load_string_list(self, key: str) -> List[str]:
        """Load a list of strings, empty if the key is missing."""
        pass

    @abstractmethod
    def save_string_list(self, key: str, values: List[str]) -> None:
        pass

    @abstractmethod
    def load_double(self, key: str) -> Optional[float]:
        """Load a float, None if the key is missing."""
        pass

    @abstractmethod
    def save_double(self, key: str, value: float) -> None:
        pass

    @abstractmethod
    def load_string(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def save_string(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass


class InMemoryStore(KeyValueStore):
    """Dict-backed store; the default when nothing is persisted to disk."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def load_string_list(self, key: str) -> List[str]:
        values = self._data.get(key)
        if not isinstance(values, list):
            return []
        return [str(value) for value in values]

    def save_string_list(self, key: str, values: List[str]) -> None:
        self._data[key] = list(values)

    def load_double(self, key: str) -> Optional[float]:
        value = self._data.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return float(value)

    def save_double(self, key: str, value: float) -> None:
        self._data[key] = float(value)

    def load_string(self, key: str) -> Optional[str]:
        value = self._data.get(key)
        return value if isinstance(value, str) else None

    def save_string(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)


class JsonFileStore(InMemoryStore):
    """Store persisted as a single JSON document on disk.

    Every save rewrites the whole document through a temporary file so a
    crash never leaves a truncated file behind.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(self._read())

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read store {self.path}, starting empty: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Store {self.path} is not a JSON object, starting empty")
            return {}
        return data

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def save_string_list(self, key: str, values: List[str]) -> None:
        super().save_string_list(key, values)
        self._write()

    def save_double(self, key: str, value: float) -> None:
        super().save_double(key, value)
        self._write()

    def save_string(self, key: str, value: str) -> None:
        super().save_string(key, value)
        self._write()

    def remove(self, key: str) -> None:
        super().remove(key)
        self._write()


def persist(action: Callable[..., None], *args: Any, description: str = "") -> bool:
    """Run a store write without letting its failure reach the caller.

    Returns:
        bool: True if the write went through
    """
    try:
        action(*args)
        return True
    except Exception as e:
        logger.warning(f"Failed to persist {description or action.__name__}: {e}")
        return False


__all__ = ["KeyValueStore", "InMemoryStore", "JsonFileStore", "persist"]

from .key_value_store import InMemoryStore, JsonFileStore, KeyValueStore

__all__ = ["KeyValueStore", "InMemoryStore", "JsonFileStore"]

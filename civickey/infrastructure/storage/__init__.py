"""Local key-value storage backends (client-side cache, preferences, reminder ids)."""

from civickey.infrastructure.storage.file_store import FileKeyValueStore
from civickey.infrastructure.storage.memory_store import MemoryKeyValueStore

__all__ = ["FileKeyValueStore", "MemoryKeyValueStore"]

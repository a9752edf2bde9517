"""Mini README: Concrete key-value storage backends.

New backends should subclass ``KeyValueStore`` and call
``STORAGE_BACKENDS.register`` during module import to stay discoverable.
"""

from .file_store import JsonFileStore
from .memory_store import InMemoryStore

__all__ = ["InMemoryStore", "JsonFileStore"]

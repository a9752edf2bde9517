"""Mini README: Local key-value storage subsystem for ChoreBoard.

Re-exports the storage abstractions so the ledger and session holder can be
wired to any backend. The package is divided into ``base`` for the abstract
store, ``registry`` for backend lookup by name, and ``backends`` for the
concrete in-memory and file implementations.
"""

from .base import KeyValueStore, load_json_record
from .registry import STORAGE_BACKENDS, StorageBackendRegistry
from . import backends  # noqa: F401  # ensure built-in backends register on import
from .backends import InMemoryStore, JsonFileStore

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "STORAGE_BACKENDS",
    "StorageBackendRegistry",
    "load_json_record",
]

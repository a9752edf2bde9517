"""Mini README: Process-local key-value backend.

Used by tests and by deployments that do not need state to survive a
restart. Behaves like a fresh browser profile on every start.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Optional

from ..base import KeyValueStore
from ..registry import STORAGE_BACKENDS


class InMemoryStore(KeyValueStore):
    """Dictionary-backed store."""

    backend_name = "memory"

    def __init__(
        self,
        directory: Optional[Path] = None,
        initial: Optional[Dict[str, str]] = None,
    ) -> None:
        # ``directory`` is accepted for registry compatibility and ignored.
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> Iterable[str]:
        return list(self._items.keys())


STORAGE_BACKENDS.register(InMemoryStore)

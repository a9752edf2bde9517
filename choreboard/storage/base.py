"""Mini README: Abstract key-value store describing local persistence.

Structure:
    * KeyValueStore - abstract interface implemented by storage backends.
    * load_json_record - decode a stored JSON value, treating corruption as absence.

Values are JSON text keyed by short names (``currentUser``,
``choreboardData``, ``choreboardSettings``). Stores never interpret the text;
decoding lives in ``load_json_record`` so every caller handles corrupt
records the same way.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class KeyValueStore(ABC):
    """Base interface for string-keyed persistent storage."""

    backend_name: str = "generic"

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored text for ``key`` or ``None`` when absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key`` replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key``; removing an absent key is not an error."""

    @abstractmethod
    def keys(self) -> Iterable[str]:
        """Return the keys currently held by the store."""

    def clear(self) -> None:
        """Remove every key held by the store."""

        for key in list(self.keys()):
            self.remove_item(key)

    def metadata(self) -> Dict[str, str]:
        """Return diagnostic metadata for logs and the CLI."""

        return {"backend": self.backend_name}


def load_json_record(store: KeyValueStore, key: str) -> Optional[Any]:
    """Decode the JSON stored under ``key``.

    Missing keys and values that are not valid JSON both yield ``None``.
    """

    raw = store.get_item(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        LOGGER.warning("Stored record '%s' is not valid JSON; treating it as absent", key)
        return None

"""Mini README: Backend registry enabling configurable key-value storage.

Structure:
    * StorageBackendRegistry - maps backend identifiers to ``KeyValueStore``
      implementations and instantiates them.

The configuration names a backend (``file`` or ``memory``) and the registry
builds it, so additional backends can register without touching callers.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Optional, Type

from .base import KeyValueStore
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class StorageBackendRegistry:
    """Simple registry for mapping backend identifiers to classes."""

    def __init__(self) -> None:
        self._backends: Dict[str, Type[KeyValueStore]] = {}

    def register(self, backend: Type[KeyValueStore]) -> None:
        """Register a new backend class with the registry."""

        identifier = backend.backend_name.lower()
        LOGGER.debug("Registering storage backend '%s'", identifier)
        self._backends[identifier] = backend

    def available_backends(self) -> Iterable[str]:
        """Return iterable of backend identifiers."""

        return sorted(self._backends.keys())

    def create(self, identifier: str, *, directory: Optional[Path] = None) -> KeyValueStore:
        """Instantiate a backend matching the identifier."""

        backend_cls = self._backends.get(identifier.lower())
        if not backend_cls:
            raise KeyError(f"Unknown storage backend '{identifier}'")
        LOGGER.info("Creating storage backend '%s'", identifier)
        return backend_cls(directory=directory)


STORAGE_BACKENDS = StorageBackendRegistry()

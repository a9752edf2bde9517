"""Mini README: Directory-backed key-value backend.

Structure:
    * JsonFileStore - persists each key as ``<key>.json`` inside a directory.

Writes go to a temporary sibling file that is then moved into place, so a
crash mid-write leaves the previous value intact rather than a truncated
record.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Dict, Iterable, Optional

from ..base import KeyValueStore
from ..registry import STORAGE_BACKENDS
from ...logging_utils import get_logger

LOGGER = get_logger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileStore(KeyValueStore):
    """Persist string values as individual files under ``directory``."""

    backend_name = "file"

    def __init__(self, directory: Optional[Path] = None) -> None:
        self.directory = Path(directory or "data").expanduser()
        self.directory.mkdir(parents=True, exist_ok=True)
        LOGGER.debug("File store rooted at %s", self.directory)

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Unsupported storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        temp_path = path.with_suffix(".json.tmp")
        temp_path.write_text(value, encoding="utf-8")
        os.replace(temp_path, path)
        LOGGER.debug("Wrote %s bytes to %s", len(value), path)

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        if path.exists():
            path.unlink()
            LOGGER.debug("Removed %s", path)

    def keys(self) -> Iterable[str]:
        return sorted(path.stem for path in self.directory.glob("*.json"))

    def metadata(self) -> Dict[str, str]:
        return {"backend": self.backend_name, "directory": str(self.directory)}


STORAGE_BACKENDS.register(JsonFileStore)

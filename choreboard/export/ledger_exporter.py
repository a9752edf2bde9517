"""Mini README: Export the persisted ledger to ``choreboard-data.json``.

Structure:
    * LedgerExporter - reads ``choreboardData`` from a store and writes it out.

The stored text is exported verbatim rather than re-serialised, so the file
is byte-for-byte what the store holds. When nothing has been stored yet
there is nothing to export and the exporter returns ``None``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..household.ledger import DATA_KEY
from ..logging_utils import get_logger
from ..storage import KeyValueStore

LOGGER = get_logger(__name__)

EXPORT_FILENAME = "choreboard-data.json"
EXPORT_CONTENT_TYPE = "application/json"


class LedgerExporter:
    """Copy the ledger blob out of a key-value store."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def payload(self) -> Optional[str]:
        """The stored ledger text, or ``None`` if no ledger exists."""

        return self._store.get_item(DATA_KEY)

    def export(self, destination: Path) -> Optional[Path]:
        """Write the ledger to ``destination``.

        A directory destination receives ``choreboard-data.json``.
        """

        payload = self.payload()
        if payload is None:
            LOGGER.warning("No household ledger stored; nothing to export")
            return None
        if destination.is_dir():
            destination = destination / EXPORT_FILENAME
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(payload, encoding="utf-8")
        LOGGER.info("Exported household ledger (%s bytes) to %s", len(payload), destination)
        return destination

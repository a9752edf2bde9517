"""Mini README: Export helpers for the household ledger.

Exposes the exporter that writes the persisted ledger to a downloadable
JSON file for the web interface and the CLI.
"""

from .ledger_exporter import EXPORT_CONTENT_TYPE, EXPORT_FILENAME, LedgerExporter

__all__ = ["EXPORT_CONTENT_TYPE", "EXPORT_FILENAME", "LedgerExporter"]

"""Mini README: Core package initializer for the ChoreBoard household ledger.

This module exposes convenience imports so that the web interface, CLI and
tests can reach the ledger and session services without needing to know the
exact module structure. Heavier dependencies (FastAPI, uvicorn) are kept out
of this file so the ledger can be used on its own.
"""

from .logging_utils import get_logger
from .household import HouseholdLedger, SessionHolder

__all__ = ["HouseholdLedger", "SessionHolder", "get_logger"]

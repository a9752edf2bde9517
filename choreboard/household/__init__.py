"""Mini README: Shared household ledger for ChoreBoard.

This package owns the household's persisted records (members, chores,
expenses and settings), the operations that change them, and the derived
figures the dashboard renders. ``ledger`` is the main entry point and
``session`` tracks which member is acting.
"""

from .ledger import DATA_KEY, SETTINGS_KEY, HouseholdLedger
from .models import Chore, ChoreStatus, Expense, ExpenseCategory, ExpenseStatus, User
from .session import SESSION_KEY, SessionHolder
from .settings import HouseholdSettings, RotationFrequency, Theme

__all__ = [
    "Chore",
    "ChoreStatus",
    "DATA_KEY",
    "Expense",
    "ExpenseCategory",
    "ExpenseStatus",
    "HouseholdLedger",
    "HouseholdSettings",
    "RotationFrequency",
    "SESSION_KEY",
    "SETTINGS_KEY",
    "SessionHolder",
    "Theme",
    "User",
]

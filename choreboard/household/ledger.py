"""Mini README: Persisted household ledger of members, chores and expenses.

Structure:
    * DATA_KEY / SETTINGS_KEY - storage keys for the ledger blob and settings.
    * HouseholdLedger - owns the collections, mutates them and answers queries.

Every mutation rewrites the whole ``choreboardData`` blob, matching the
single-session, last-write-wins model of the browser edition. Invalid input
and unknown ids never raise: creation methods return ``None`` and state
transitions return ``False`` so callers can tell that nothing changed.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from . import statistics
from .models import (
    Chore,
    ChoreStatus,
    Expense,
    ExpenseCategory,
    ExpenseStatus,
    User,
    email_local_part,
    parse_amount,
    parse_timestamp,
    utc_now,
)
from .settings import HouseholdSettings, merge_settings
from ..logging_utils import get_logger
from ..storage import KeyValueStore, load_json_record

LOGGER = get_logger(__name__)

DATA_KEY = "choreboardData"
SETTINGS_KEY = "choreboardSettings"

UserRef = Union[str, User]

_COLLECTIONS = ("users", "chores", "expenses")


def _load_records(payload: Dict[str, Any], key: str, record_type: Any) -> Dict[str, Any]:
    """Parse one stored collection, skipping records that cannot be read."""

    records: Dict[str, Any] = {}
    for item in payload.get(key, []):
        try:
            record = record_type.from_dict(item)
        except (KeyError, TypeError, ValueError, AttributeError) as error:
            LOGGER.warning("Skipping malformed %s record (%s)", key, error)
            continue
        records[record.id] = record
    return records


class HouseholdLedger:
    """Manage the shared household collections on top of a key-value store."""

    def __init__(self, store: KeyValueStore, *, clock: Callable[[], datetime] = utc_now) -> None:
        self._store = store
        self._clock = clock
        self._users: Dict[str, User] = {}
        self._chores: Dict[str, Chore] = {}
        self._expenses: Dict[str, Expense] = {}
        self._settings = HouseholdSettings()
        self._loaded = False
        self.reload()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def reload(self) -> None:
        """Replace the in-memory mirror with what the store currently holds."""

        self._users, self._chores, self._expenses = {}, {}, {}
        self._loaded = False
        payload = load_json_record(self._store, DATA_KEY)
        if isinstance(payload, dict) and all(
            isinstance(payload.get(key, []), list) for key in _COLLECTIONS
        ):
            self._users = _load_records(payload, "users", User)
            self._chores = _load_records(payload, "chores", Chore)
            self._expenses = _load_records(payload, "expenses", Expense)
            self._loaded = True
        elif payload is not None:
            LOGGER.warning("Stored ledger has an unexpected shape; starting empty")

        self._settings = HouseholdSettings()
        stored_settings = load_json_record(self._store, SETTINGS_KEY)
        if isinstance(stored_settings, dict):
            try:
                self._settings = HouseholdSettings.from_dict(stored_settings)
            except ValidationError as error:
                LOGGER.warning("Stored settings are invalid; using defaults: %s", error)

        LOGGER.debug(
            "Ledger loaded with %s users, %s chores, %s expenses",
            len(self._users),
            len(self._chores),
            len(self._expenses),
        )

    def has_persisted_data(self) -> bool:
        """True when the last load or write produced a usable ledger.

        Individual malformed records do not count against this; a blob that is
        not JSON, or whose collections are not lists, does.
        """

        return self._loaded

    def snapshot(self) -> Dict[str, List[Dict[str, Any]]]:
        """Export the ledger in its persisted JSON shape."""

        return {
            "users": [user.as_dict() for user in self._users.values()],
            "chores": [chore.as_dict() for chore in self._chores.values()],
            "expenses": [expense.as_dict() for expense in self._expenses.values()],
        }

    def export_json(self) -> str:
        return json.dumps(self.snapshot())

    def _persist(self) -> None:
        self._store.set_item(DATA_KEY, self.export_json())
        self._loaded = True

    def clear(self) -> None:
        """Forget the ledger and settings, both in memory and in the store."""

        self._store.remove_item(DATA_KEY)
        self._store.remove_item(SETTINGS_KEY)
        self.reload()
        LOGGER.info("Household ledger cleared")

    def seed_for(self, user: User, now: Optional[datetime] = None) -> bool:
        """Create the first-run ledger around ``user``.

        Does nothing and returns ``False`` when a ledger already exists.
        """

        if self.has_persisted_data():
            return False
        moment = parse_timestamp(now) if now is not None else self._clock()
        self._users = {user.id: user}
        self._chores = {
            "1": Chore(
                id="1",
                name="Take out trash",
                description="Empty all trash bins and take to curb",
                assigned_to=user.id,
                assigned_to_name=user.name,
                due_date=moment + timedelta(days=2),
                status=ChoreStatus.PENDING,
                created_by=user.id,
            ),
            "2": Chore(
                id="2",
                name="Clean kitchen",
                description="Wipe counters, clean sink, and sweep floor",
                assigned_to=user.id,
                assigned_to_name=user.name,
                due_date=moment + timedelta(days=3),
                status=ChoreStatus.PENDING,
                created_by=user.id,
            ),
        }
        self._expenses = {
            "1": Expense(
                id="1",
                amount=120.5,
                description="Electricity bill",
                category=ExpenseCategory.UTILITIES,
                paid_by=user.id,
                paid_by_name=user.name,
                date=moment,
                status=ExpenseStatus.APPROVED,
                split_between=[user.id],
            ),
            "2": Expense(
                id="2",
                amount=85.3,
                description="Groceries",
                category=ExpenseCategory.FOOD,
                paid_by=user.id,
                paid_by_name=user.name,
                date=moment,
                status=ExpenseStatus.PENDING,
                split_between=[user.id],
            ),
        }
        self._persist()
        LOGGER.info("Seeded household ledger for %s", user.email)
        return True

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    @property
    def users(self) -> List[User]:
        return list(self._users.values())

    @property
    def chores(self) -> List[Chore]:
        return list(self._chores.values())

    @property
    def expenses(self) -> List[Expense]:
        return list(self._expenses.values())

    @property
    def settings(self) -> HouseholdSettings:
        return self._settings

    def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def get_chore(self, chore_id: str) -> Optional[Chore]:
        return self._chores.get(chore_id)

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        return self._expenses.get(expense_id)

    def find_user_by_email(self, email: str) -> Optional[User]:
        """First member whose email matches case-insensitively."""

        wanted = email.strip().lower()
        for user in self._users.values():
            if user.email.lower() == wanted:
                return user
        return None

    def display_name(self, user_id: str, fallback: str = "") -> str:
        """Current name of ``user_id``, or ``fallback`` if they left."""

        user = self._users.get(user_id)
        return user.name if user else fallback

    def _resolve_user(self, reference: UserRef) -> Optional[User]:
        if isinstance(reference, User):
            return reference
        return self._users.get(reference) if reference else None

    def _next_id(self, taken: Mapping[str, object], now: Optional[datetime] = None) -> str:
        """Time-derived identifier, bumped until unused in ``taken``."""

        moment = now if now is not None else self._clock()
        candidate = int(moment.timestamp() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------
    def new_user_id(self, now: Optional[datetime] = None) -> str:
        """Fresh member id for a registration."""

        return self._next_id(self._users, now)

    def add_user(self, user: User) -> bool:
        """Register a member created by the session holder."""

        if user.id in self._users:
            return False
        self._users[user.id] = user
        self._persist()
        LOGGER.info("Registered member %s (%s)", user.id, user.email)
        return True

    def invite_roommate(self, email: str) -> Optional[User]:
        """Add a non-admin member named after the email's local part."""

        email = (email or "").strip()
        if not email:
            LOGGER.debug("Invite ignored: email missing")
            return None
        user = User(
            id=self._next_id(self._users),
            name=email_local_part(email),
            email=email,
            is_admin=False,
        )
        self._users[user.id] = user
        self._persist()
        LOGGER.info("Invited roommate %s as %s", email, user.id)
        return user

    def remove_roommate(self, user_id: str, acting_user: UserRef) -> bool:
        """Remove a member; a member can never remove themselves."""

        acting_id = acting_user.id if isinstance(acting_user, User) else acting_user
        if user_id == acting_id:
            LOGGER.info("Refusing to remove acting member %s", user_id)
            return False
        if self._users.pop(user_id, None) is None:
            LOGGER.debug("Remove ignored: member %s not found", user_id)
            return False
        self._persist()
        LOGGER.info("Removed member %s", user_id)
        return True

    # ------------------------------------------------------------------
    # Chores
    # ------------------------------------------------------------------
    def create_chore(
        self,
        name: str,
        description: str,
        assigned_to: str,
        due_date: object,
        created_by: UserRef,
    ) -> Optional[Chore]:
        """Create a pending chore, or return ``None`` if input is incomplete."""

        name = (name or "").strip()
        assignee = self._users.get(assigned_to) if assigned_to else None
        creator_id = created_by.id if isinstance(created_by, User) else (created_by or "")
        if not name or assignee is None or not due_date:
            LOGGER.debug("Chore creation ignored: name=%r assigned_to=%r", name, assigned_to)
            return None
        try:
            due = parse_timestamp(due_date)
        except ValueError:
            LOGGER.debug("Chore creation ignored: bad due date %r", due_date)
            return None

        chore = Chore(
            id=self._next_id(self._chores),
            name=name,
            description=(description or "").strip(),
            assigned_to=assignee.id,
            assigned_to_name=assignee.name,
            due_date=due,
            status=ChoreStatus.PENDING,
            created_by=creator_id,
        )
        self._chores[chore.id] = chore
        self._persist()
        LOGGER.info("Created chore %s '%s' for %s", chore.id, chore.name, assignee.id)
        return chore

    def complete_chore(self, chore_id: str) -> bool:
        """Move a pending chore to completed. Completed chores stay as they are."""

        chore = self._chores.get(chore_id)
        if chore is None or not chore.is_pending:
            LOGGER.debug("Completion ignored for chore %s", chore_id)
            return False
        chore.status = ChoreStatus.COMPLETED
        self._persist()
        LOGGER.info("Completed chore %s", chore_id)
        return True

    def delete_chore(self, chore_id: str) -> bool:
        if self._chores.pop(chore_id, None) is None:
            LOGGER.debug("Delete ignored: chore %s not found", chore_id)
            return False
        self._persist()
        LOGGER.info("Deleted chore %s", chore_id)
        return True

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------
    def create_expense(
        self,
        amount: object,
        description: str,
        category: str,
        paid_by: UserRef,
    ) -> Optional[Expense]:
        """Log an expense; admins' expenses are approved immediately.

        ``paid_by`` may be a member id or the acting ``User`` itself.
        """

        payer = self._resolve_user(paid_by)
        description = (description or "").strip()
        if payer is None or not description or not category or amount in (None, ""):
            LOGGER.debug("Expense creation ignored: missing fields")
            return None
        try:
            parsed_amount = parse_amount(amount)
            parsed_category = ExpenseCategory.from_str(category)
        except ValueError as error:
            LOGGER.debug("Expense creation ignored: %s", error)
            return None

        expense = Expense(
            id=self._next_id(self._expenses),
            amount=parsed_amount,
            description=description,
            category=parsed_category,
            paid_by=payer.id,
            paid_by_name=payer.name,
            date=self._clock(),
            status=ExpenseStatus.APPROVED if payer.is_admin else ExpenseStatus.PENDING,
            split_between=[payer.id],
        )
        self._expenses[expense.id] = expense
        self._persist()
        LOGGER.info(
            "Logged expense %s %.2f (%s) by %s as %s",
            expense.id,
            expense.amount,
            expense.category.value,
            payer.id,
            expense.status.value,
        )
        return expense

    def approve_expense(self, expense_id: str) -> bool:
        expense = self._expenses.get(expense_id)
        if expense is None or not expense.is_pending:
            LOGGER.debug("Approval ignored for expense %s", expense_id)
            return False
        expense.status = ExpenseStatus.APPROVED
        self._persist()
        LOGGER.info("Approved expense %s", expense_id)
        return True

    def reject_expense(self, expense_id: str) -> bool:
        """Rejecting removes the expense; no rejected record is kept."""

        if self._expenses.pop(expense_id, None) is None:
            LOGGER.debug("Reject ignored: expense %s not found", expense_id)
            return False
        self._persist()
        LOGGER.info("Rejected and removed expense %s", expense_id)
        return True

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    def update_settings(self, partial: Mapping[str, Any]) -> HouseholdSettings:
        """Merge ``partial`` into the settings record and persist it."""

        self._settings = merge_settings(self._settings, partial)
        self._store.set_item(SETTINGS_KEY, json.dumps(self._settings.as_dict()))
        LOGGER.info("Updated settings sections: %s", ", ".join(sorted(partial)))
        return self._settings

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------
    def my_chores(self, user_id: str) -> List[Chore]:
        return statistics.my_chores(self._chores.values(), user_id)

    def visible_chores(self, user: User) -> List[Chore]:
        return statistics.visible_chores(self._chores.values(), user)

    def completion_rate(self, user_id: str) -> float:
        return statistics.completion_rate(self._chores.values(), user_id)

    def pending_expenses(self) -> List[Expense]:
        return statistics.pending_expenses(self._expenses.values())

    def total_approved(self) -> float:
        return statistics.total_approved(self._expenses.values())

    def monthly_approved_total(self, now: Optional[datetime] = None) -> float:
        return statistics.monthly_approved_total(self._expenses.values(), now or self._clock())

    def my_share(self, total: Optional[float] = None, participant_count: Optional[int] = None) -> float:
        """Even share of approved spend; defaults to the current totals."""

        if total is None:
            total = self.total_approved()
        if participant_count is None:
            participant_count = len(self._users)
        return statistics.my_share(total, participant_count)

    def pending_notifications(self, user: User, now: Optional[datetime] = None) -> List[str]:
        return statistics.pending_notifications(
            self._chores.values(), self._expenses.values(), user, now or self._clock()
        )

    def dashboard_summary(self, user: User, now: Optional[datetime] = None) -> Dict[str, Any]:
        return statistics.summarise_dashboard(
            self.users, self.chores, self.expenses, user, now or self._clock()
        )

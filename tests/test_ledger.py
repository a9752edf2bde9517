"""Mini README: Tests covering the household ledger operations.

Structure:
    * seeding - first-run ledger content and refusal to reseed.
    * chores - creation no-ops, completion idempotence, deletion.
    * expenses - approval flow, rejection as removal, amount parsing.
    * roommates - invitations and the self-removal guard.
    * persistence - round trip through a store, skipped malformed records and
      the corrupt-ledger fallback.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from choreboard.household import (
    DATA_KEY,
    SETTINGS_KEY,
    ChoreStatus,
    ExpenseCategory,
    ExpenseStatus,
    HouseholdLedger,
    RotationFrequency,
    Theme,
    User,
)
from choreboard.storage import InMemoryStore, JsonFileStore

NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)
ADMIN = User(id="100", name="Avery", email="avery@example.com", is_admin=True)
MEMBER = User(id="200", name="Blake", email="blake@example.com", is_admin=False)


def _ledger(store: InMemoryStore | None = None) -> HouseholdLedger:
    return HouseholdLedger(store if store is not None else InMemoryStore(), clock=lambda: NOW)


def _household() -> HouseholdLedger:
    ledger = _ledger()
    ledger.seed_for(ADMIN)
    ledger.add_user(MEMBER)
    return ledger


def test_seed_creates_two_chores_and_two_expenses() -> None:
    """The first-run ledger belongs entirely to the signing-up member."""

    ledger = _ledger()
    assert ledger.seed_for(ADMIN) is True

    assert [user.id for user in ledger.users] == [ADMIN.id]
    assert len(ledger.chores) == 2
    assert all(chore.assigned_to == ADMIN.id for chore in ledger.chores)
    assert [chore.due_date for chore in ledger.chores] == [NOW + timedelta(days=2), NOW + timedelta(days=3)]

    electricity, groceries = ledger.expenses
    assert electricity.amount == pytest.approx(120.50)
    assert electricity.description == "Electricity bill"
    assert electricity.category is ExpenseCategory.UTILITIES
    assert electricity.status is ExpenseStatus.APPROVED
    assert groceries.amount == pytest.approx(85.30)
    assert groceries.description == "Groceries"
    assert groceries.category is ExpenseCategory.FOOD
    assert groceries.status is ExpenseStatus.PENDING
    assert all(expense.paid_by == ADMIN.id for expense in ledger.expenses)


def test_seed_is_skipped_when_ledger_exists() -> None:
    ledger = _household()

    assert ledger.seed_for(User(id="300", name="Casey", email="casey@example.com")) is False
    assert len(ledger.users) == 2
    assert len(ledger.chores) == 2


def test_create_chore_snapshots_assignee_name() -> None:
    ledger = _household()

    chore = ledger.create_chore("Vacuum", "Living room", MEMBER.id, "2024-05-20", ADMIN)

    assert chore is not None
    assert chore.status is ChoreStatus.PENDING
    assert chore.assigned_to_name == "Blake"
    assert chore.created_by == ADMIN.id
    assert chore.due_date == datetime(2024, 5, 20, tzinfo=timezone.utc)
    assert chore.id == str(int(NOW.timestamp() * 1000))
    assert ledger.get_chore(chore.id) is chore


@pytest.mark.parametrize(
    "name, assigned_to, due_date",
    [
        ("", MEMBER.id, "2024-05-20"),
        ("Vacuum", "", "2024-05-20"),
        ("Vacuum", "unknown", "2024-05-20"),
        ("Vacuum", MEMBER.id, ""),
        ("Vacuum", MEMBER.id, "next tuesday"),
    ],
)
def test_create_chore_with_missing_fields_is_a_no_op(name: str, assigned_to: str, due_date: str) -> None:
    ledger = _household()
    before = ledger.export_json()

    assert ledger.create_chore(name, "", assigned_to, due_date, ADMIN) is None
    assert ledger.export_json() == before


def test_generated_ids_stay_unique_within_the_same_millisecond() -> None:
    ledger = _household()

    first = ledger.create_chore("Dishes", "", MEMBER.id, NOW, ADMIN)
    second = ledger.create_chore("Laundry", "", MEMBER.id, NOW, ADMIN)

    assert first is not None and second is not None
    assert first.id != second.id


def test_completing_twice_keeps_single_completed_chore() -> None:
    """Completion is one-way and repeating it changes nothing."""

    ledger = _household()
    chore = ledger.create_chore("Dishes", "", MEMBER.id, NOW, ADMIN)
    assert chore is not None

    assert ledger.complete_chore(chore.id) is True
    assert ledger.complete_chore(chore.id) is False

    matching = [item for item in ledger.chores if item.id == chore.id]
    assert len(matching) == 1
    assert matching[0].status is ChoreStatus.COMPLETED
    assert len(ledger.chores) == 3


def test_complete_and_delete_unknown_chore_are_no_ops() -> None:
    ledger = _household()

    assert ledger.complete_chore("missing") is False
    assert ledger.delete_chore("missing") is False
    assert ledger.delete_chore("1") is True
    assert [chore.id for chore in ledger.chores] == ["2"]


def test_expense_status_depends_on_payer_role() -> None:
    """Admins are approved immediately; everyone else waits for approval."""

    ledger = _household()

    by_member = ledger.create_expense("42.10", "Paper towels", "cleaning", MEMBER.id)
    by_admin = ledger.create_expense(42.10, "Paper towels", "Cleaning", ADMIN)

    assert by_member is not None and by_admin is not None
    assert by_member.status is ExpenseStatus.PENDING
    assert by_admin.status is ExpenseStatus.APPROVED
    assert by_member.category is ExpenseCategory.CLEANING
    assert by_member.split_between == [MEMBER.id]
    assert by_member.paid_by_name == "Blake"
    assert by_member.date == NOW


@pytest.mark.parametrize("amount", ["", "abc", "-5", "nan", None])
def test_create_expense_rejects_unusable_amounts(amount: object) -> None:
    ledger = _household()

    assert ledger.create_expense(amount, "Snacks", "Food", MEMBER.id) is None
    assert len(ledger.expenses) == 2


def test_create_expense_requires_description_category_and_payer() -> None:
    ledger = _household()

    assert ledger.create_expense("10", "", "Food", MEMBER.id) is None
    assert ledger.create_expense("10", "Snacks", "", MEMBER.id) is None
    assert ledger.create_expense("10", "Snacks", "Travel", MEMBER.id) is None
    assert ledger.create_expense("10", "Snacks", "Food", "nobody") is None
    assert len(ledger.expenses) == 2


def test_approve_and_reject_expenses() -> None:
    ledger = _household()

    assert ledger.approve_expense("2") is True
    assert ledger.approve_expense("2") is False
    assert ledger.get_expense("2").status is ExpenseStatus.APPROVED

    assert ledger.reject_expense("1") is True
    assert ledger.get_expense("1") is None
    assert ledger.reject_expense("1") is False
    assert ledger.approve_expense("missing") is False


def test_invite_roommate_derives_name_from_email() -> None:
    ledger = _household()

    invited = ledger.invite_roommate("  jordan.lee@example.com ")
    duplicate = ledger.invite_roommate("jordan.lee@example.com")

    assert invited is not None and duplicate is not None
    assert invited.name == "jordan.lee"
    assert invited.is_admin is False
    assert invited.id != duplicate.id
    assert ledger.invite_roommate("") is None
    assert len(ledger.users) == 4


def test_remove_roommate_never_removes_acting_member() -> None:
    ledger = _household()

    assert ledger.remove_roommate(ADMIN.id, ADMIN) is False
    assert ledger.remove_roommate(MEMBER.id, MEMBER.id) is False
    assert len(ledger.users) == 2

    assert ledger.remove_roommate(MEMBER.id, ADMIN) is True
    assert ledger.remove_roommate(MEMBER.id, ADMIN) is False
    assert [user.id for user in ledger.users] == [ADMIN.id]


def test_removed_member_keeps_snapshot_names_but_display_falls_back() -> None:
    ledger = _household()
    chore = ledger.create_chore("Mop", "", MEMBER.id, NOW, ADMIN)
    assert chore is not None

    ledger.remove_roommate(MEMBER.id, ADMIN)

    assert ledger.get_chore(chore.id).assigned_to_name == "Blake"
    assert ledger.display_name(MEMBER.id, chore.assigned_to_name) == "Blake"
    assert ledger.display_name(ADMIN.id, "stale") == "Avery"


def test_every_mutation_is_persisted_and_reloads_equal(tmp_path) -> None:
    """Reloading from disk reproduces every record field for field."""

    store = JsonFileStore(tmp_path)
    ledger = HouseholdLedger(store, clock=lambda: NOW)
    ledger.seed_for(ADMIN)
    ledger.add_user(MEMBER)
    chore = ledger.create_chore("Vacuum", "Hallway", MEMBER.id, "2024-05-20T08:30:00.123Z", ADMIN)
    ledger.complete_chore("1")
    ledger.create_expense("19.99", "Router", "Internet", MEMBER)
    ledger.approve_expense("2")
    ledger.invite_roommate("casey@example.com")

    reloaded = HouseholdLedger(JsonFileStore(tmp_path), clock=lambda: NOW)

    assert reloaded.users == ledger.users
    assert reloaded.chores == ledger.chores
    assert reloaded.expenses == ledger.expenses
    assert reloaded.get_chore(chore.id).due_date.microsecond == 123000
    assert json.loads(store.get_item(DATA_KEY)) == ledger.snapshot()


def test_corrupt_ledger_is_treated_as_absent() -> None:
    store = InMemoryStore(initial={DATA_KEY: "{not json", SETTINGS_KEY: "[1, 2"})

    ledger = _ledger(store)

    assert ledger.users == [] and ledger.chores == [] and ledger.expenses == []
    assert ledger.has_persisted_data() is False
    assert ledger.settings.general.theme is Theme.LIGHT
    assert ledger.seed_for(ADMIN) is True
    assert len(ledger.chores) == 2


def test_update_settings_merges_and_persists() -> None:
    store = InMemoryStore()
    ledger = _ledger(store)

    ledger.update_settings({"choreRotation": {"enabled": True}})
    updated = ledger.update_settings({"chore_rotation": {"frequency": "monthly"}, "general": {"theme": "dark"}})

    assert updated.chore_rotation.enabled is True
    assert updated.chore_rotation.frequency is RotationFrequency.MONTHLY
    assert updated.general.theme is Theme.DARK
    assert updated.notifications.chore_reminders is True
    assert json.loads(store.get_item(SETTINGS_KEY))["choreRotation"] == {"enabled": True, "frequency": "monthly"}
    assert _ledger(store).settings == updated


def test_update_settings_rejects_unknown_values() -> None:
    ledger = _ledger()

    with pytest.raises(ValidationError):
        ledger.update_settings({"general": {"theme": "neon"}})
    assert ledger.settings.general.theme is Theme.LIGHT


def test_clear_removes_persisted_state() -> None:
    store = InMemoryStore()
    ledger = _ledger(store)
    ledger.seed_for(ADMIN)
    ledger.update_settings({"general": {"autoApproveExpenses": True}})

    ledger.clear()

    assert store.get_item(DATA_KEY) is None
    assert store.get_item(SETTINGS_KEY) is None
    assert ledger.users == []
    assert ledger.settings.general.auto_approve_expenses is False


def _blob_with_bad_expense() -> str:
    return json.dumps(
        {
            "users": [{"id": "1", "name": "Avery", "email": "avery@example.com", "isAdmin": True}],
            "chores": [
                {
                    "id": "c1",
                    "name": "Dishes",
                    "description": "",
                    "assignedTo": "1",
                    "assignedToName": "Avery",
                    "dueDate": "2024-05-16T12:00:00.000Z",
                    "status": "pending",
                    "createdBy": "1",
                },
                {"id": "c2", "name": "No due date"},
            ],
            "expenses": [
                {
                    "id": "e1",
                    "amount": -1,
                    "description": "Broken",
                    "category": "Food",
                    "paidBy": "1",
                    "paidByName": "Avery",
                    "date": "2024-05-15T12:00:00.000Z",
                    "status": "approved",
                    "splitBetween": ["1"],
                }
            ],
        }
    )


def test_malformed_records_are_skipped_and_the_rest_survive() -> None:
    """One unreadable row must not cost the household its other records."""

    store = InMemoryStore(initial={DATA_KEY: _blob_with_bad_expense()})
    ledger = _ledger(store)

    assert [user.id for user in ledger.users] == ["1"]
    assert [chore.id for chore in ledger.chores] == ["c1"]
    assert ledger.expenses == []
    assert ledger.has_persisted_data() is True
    assert ledger.seed_for(ADMIN) is False

    invited = ledger.invite_roommate("blake@example.com")
    assert invited is not None

    stored = json.loads(store.get_item(DATA_KEY))
    assert [user["id"] for user in stored["users"]] == ["1", invited.id]
    assert [chore["id"] for chore in stored["chores"]] == ["c1"]


def test_ledger_with_non_list_collections_counts_as_absent() -> None:
    store = InMemoryStore(initial={DATA_KEY: json.dumps({"users": "oops", "chores": []})})
    ledger = _ledger(store)

    assert ledger.users == []
    assert ledger.has_persisted_data() is False
    assert ledger.seed_for(ADMIN) is True
    assert len(ledger.chores) == 2


def test_create_chore_without_creator_is_allowed() -> None:
    ledger = _household()

    chore = ledger.create_chore("Windows", "", MEMBER.id, "2024-05-20", "")

    assert chore is not None
    assert chore.created_by == ""

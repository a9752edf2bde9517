"""Mini README: Derived views over the household collections.

Structure:
    * my_chores / visible_chores - chore filters per member.
    * completion_rate - share of a member's chores already completed.
    * total_approved / monthly_approved_total / my_share - expense figures.
    * pending_notifications - advisory messages for the dashboard banner.
    * summarise_dashboard - aggregate used by the dashboard view.

Every function is pure: it receives the collections and returns a fresh
value, so callers can recompute on each render without caching.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Sequence

from .models import Chore, ChoreStatus, Expense, ExpenseStatus, User, format_timestamp, parse_timestamp

DUE_SOON_WINDOW = timedelta(days=1)
RECENT_ITEMS = 3


def my_chores(chores: Iterable[Chore], user_id: str) -> List[Chore]:
    """Chores assigned to ``user_id`` in collection order."""

    return [chore for chore in chores if chore.assigned_to == user_id]


def visible_chores(chores: Iterable[Chore], user: User) -> List[Chore]:
    """All chores for admins, otherwise only the member's own."""

    if user.is_admin:
        return list(chores)
    return my_chores(chores, user.id)


def completion_rate(chores: Iterable[Chore], user_id: str) -> float:
    """Fraction of the member's chores that are completed, 0.0 when none."""

    assigned = my_chores(chores, user_id)
    if not assigned:
        return 0.0
    completed = sum(1 for chore in assigned if chore.status is ChoreStatus.COMPLETED)
    return completed / len(assigned)


def approved_expenses(expenses: Iterable[Expense]) -> List[Expense]:
    return [expense for expense in expenses if expense.status is ExpenseStatus.APPROVED]


def pending_expenses(expenses: Iterable[Expense]) -> List[Expense]:
    return [expense for expense in expenses if expense.status is ExpenseStatus.PENDING]


def total_approved(expenses: Iterable[Expense]) -> float:
    return sum((expense.amount for expense in approved_expenses(expenses)), 0.0)


def monthly_approved_total(expenses: Iterable[Expense], now: datetime) -> float:
    """Approved spend dated in the same calendar month and year as ``now``."""

    reference = parse_timestamp(now)
    return sum(
        (
            expense.amount
            for expense in approved_expenses(expenses)
            if expense.date.year == reference.year and expense.date.month == reference.month
        ),
        0.0,
    )


def my_share(total: float, participant_count: int) -> float:
    """Even split of ``total`` across every current member.

    Individual ``split_between`` lists are not consulted.
    """

    return total / max(1, participant_count)


def pending_notifications(
    chores: Iterable[Chore],
    expenses: Iterable[Expense],
    user: User,
    now: datetime,
) -> List[str]:
    """Advisory messages for ``user``: chores due within a day, approvals waiting."""

    horizon = parse_timestamp(now) + DUE_SOON_WINDOW
    notifications: List[str] = []
    due_soon = [
        chore
        for chore in my_chores(chores, user.id)
        if chore.status is ChoreStatus.PENDING and chore.due_date <= horizon
    ]
    if due_soon:
        notifications.append(f"You have {len(due_soon)} chore(s) due soon!")
    if user.is_admin:
        waiting = pending_expenses(expenses)
        if waiting:
            notifications.append(f"{len(waiting)} expense(s) need approval")
    return notifications


def summarise_dashboard(
    users: Sequence[User],
    chores: Sequence[Chore],
    expenses: Sequence[Expense],
    user: User,
    now: datetime,
) -> Dict[str, Any]:
    """Aggregate figures rendered on the member dashboard.

    Recent items carry current member names, falling back to the stored
    snapshot for members who have left.
    """

    assigned = my_chores(chores, user.id)
    completed = [chore for chore in assigned if chore.status is ChoreStatus.COMPLETED]
    approved_total = total_approved(expenses)
    names = {member.id: member.name for member in users}
    recent_chores = [chore.as_dict() for chore in assigned[:RECENT_ITEMS]]
    for payload in recent_chores:
        payload["assignedToName"] = names.get(payload["assignedTo"], payload["assignedToName"])
    recent_expenses = [expense.as_dict() for expense in expenses[:RECENT_ITEMS]]
    for payload in recent_expenses:
        payload["paidByName"] = names.get(payload["paidBy"], payload["paidByName"])
    return {
        "user": user.as_dict(),
        "generated_at": format_timestamp(now),
        "my_chore_count": len(assigned),
        "completed_chore_count": len(completed),
        "pending_chore_count": len(assigned) - len(completed),
        "completion_rate_percent": completion_rate(chores, user.id) * 100,
        "total_approved": approved_total,
        "monthly_approved_total": monthly_approved_total(expenses, now),
        "my_share": my_share(approved_total, len(users)),
        "pending_expense_count": len(pending_expenses(expenses)),
        "roommate_count": len(users),
        "notifications": pending_notifications(chores, expenses, user, now),
        "recent_chores": recent_chores,
        "recent_expenses": recent_expenses,
    }

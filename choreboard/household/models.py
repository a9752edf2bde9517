"""Mini README: Record types stored in the household ledger.

Structure:
    * ChoreStatus / ExpenseStatus / ExpenseCategory - enums with lenient parsing.
    * User, Chore, Expense - dataclasses with camelCase ``as_dict``/``from_dict``.
    * parse_timestamp / format_timestamp / utc_now - timestamp helpers.

Records serialise to the same JSON shape the browser edition wrote to local
storage, so exported files stay interchangeable. Timestamps are always
timezone-aware UTC values truncated to milliseconds, which keeps a
save-then-load cycle lossless.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List


class ChoreStatus(str, Enum):
    """Lifecycle of a chore. Transitions only go pending -> completed."""

    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def from_str(cls, value: str) -> "ChoreStatus":
        """Coerce arbitrary casing into a valid chore status."""

        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported chore status: {value}") from error


class ExpenseStatus(str, Enum):
    """Approval state of an expense."""

    PENDING = "pending"
    APPROVED = "approved"

    @classmethod
    def from_str(cls, value: str) -> "ExpenseStatus":
        """Coerce arbitrary casing into a valid expense status."""

        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported expense status: {value}") from error


class ExpenseCategory(str, Enum):
    """Categories offered when logging an expense."""

    UTILITIES = "Utilities"
    FOOD = "Food"
    RENT = "Rent"
    INTERNET = "Internet"
    CLEANING = "Cleaning"
    OTHER = "Other"

    @classmethod
    def from_str(cls, value: str) -> "ExpenseCategory":
        """Match a category name case-insensitively."""

        try:
            normalised = value.strip().lower()
        except AttributeError as error:
            raise ValueError(f"Unsupported expense category: {value}") from error
        for category in cls:
            if category.value.lower() == normalised:
                return category
        raise ValueError(f"Unsupported expense category: {value}")


def utc_now() -> datetime:
    """Return the current instant at millisecond precision."""

    return _truncate(datetime.now(timezone.utc))


def _truncate(moment: datetime) -> datetime:
    return moment.replace(microsecond=(moment.microsecond // 1000) * 1000)


def parse_timestamp(value: object) -> datetime:
    """Parse ISO strings, dates or datetimes into an aware UTC datetime.

    A bare ``YYYY-MM-DD`` string or ``date`` means midnight UTC on that day.
    Naive datetimes are assumed to already be UTC.
    """

    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Timestamps must not be empty.")
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        try:
            moment = datetime.fromisoformat(text)
        except ValueError as error:
            raise ValueError(f"Unsupported timestamp: {value}") from error
    else:
        raise ValueError("Timestamps must be ISO strings or date/datetime instances.")

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return _truncate(moment.astimezone(timezone.utc))


def format_timestamp(moment: datetime) -> str:
    """Render a timestamp as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    text = parse_timestamp(moment).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_amount(value: object) -> float:
    """Parse a non-negative finite amount from form text or a number."""

    if isinstance(value, bool):
        raise ValueError("Amounts must be numeric.")
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as error:
        raise ValueError(f"Unsupported amount: {value!r}") from error
    if math.isnan(amount) or math.isinf(amount) or amount < 0:
        raise ValueError(f"Amounts must be finite and non-negative: {value!r}")
    return amount


def email_local_part(email: str) -> str:
    """Return the portion of ``email`` before the ``@``."""

    return email.strip().split("@")[0]


@dataclass(slots=True)
class User:
    """A household member. ``is_admin`` is self-declared at signup."""

    id: str
    name: str
    email: str
    is_admin: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "isAdmin": self.is_admin,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "User":
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name", "")),
            email=str(payload.get("email", "")),
            is_admin=bool(payload.get("isAdmin", False)),
        )


@dataclass(slots=True)
class Chore:
    """A task assigned to one household member."""

    id: str
    name: str
    description: str
    assigned_to: str
    assigned_to_name: str
    due_date: datetime
    status: ChoreStatus = ChoreStatus.PENDING
    created_by: str = ""

    @property
    def is_pending(self) -> bool:
        return self.status is ChoreStatus.PENDING

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "assignedTo": self.assigned_to,
            "assignedToName": self.assigned_to_name,
            "dueDate": format_timestamp(self.due_date),
            "status": self.status.value,
            "createdBy": self.created_by,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Chore":
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name", "")),
            description=str(payload.get("description", "")),
            assigned_to=str(payload.get("assignedTo", "")),
            assigned_to_name=str(payload.get("assignedToName", "")),
            due_date=parse_timestamp(payload["dueDate"]),
            status=ChoreStatus.from_str(payload.get("status", ChoreStatus.PENDING.value)),
            created_by=str(payload.get("createdBy", "")),
        )


@dataclass(slots=True)
class Expense:
    """A shared cost logged by one member."""

    id: str
    amount: float
    description: str
    category: ExpenseCategory
    paid_by: str
    paid_by_name: str
    date: datetime
    status: ExpenseStatus = ExpenseStatus.PENDING
    split_between: List[str] = field(default_factory=list)

    @property
    def is_pending(self) -> bool:
        return self.status is ExpenseStatus.PENDING

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "amount": self.amount,
            "description": self.description,
            "category": self.category.value,
            "paidBy": self.paid_by,
            "paidByName": self.paid_by_name,
            "date": format_timestamp(self.date),
            "status": self.status.value,
            "splitBetween": list(self.split_between),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Expense":
        return cls(
            id=str(payload["id"]),
            amount=parse_amount(payload.get("amount", 0)),
            description=str(payload.get("description", "")),
            category=ExpenseCategory.from_str(payload.get("category", ExpenseCategory.OTHER.value)),
            paid_by=str(payload.get("paidBy", "")),
            paid_by_name=str(payload.get("paidByName", "")),
            date=parse_timestamp(payload["date"]),
            status=ExpenseStatus.from_str(payload.get("status", ExpenseStatus.PENDING.value)),
            split_between=[str(member) for member in payload.get("splitBetween", [])],
        )

"""Mini README: Household preference record.

Structure:
    * RotationFrequency / Theme - enums for the selectable options.
    * NotificationSettings, ChoreRotationSettings, GeneralSettings - sections.
    * HouseholdSettings - singleton record persisted as ``choreboardSettings``.
    * merge_settings - apply a partial update section by section.

The record is configuration data only. Nothing in the ledger reads the
rotation or auto-approve toggles; they are stored for the interface to show.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RotationFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


class _SettingsSection(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class NotificationSettings(_SettingsSection):
    chore_reminders: bool = True
    expense_alerts: bool = True
    weekly_reports: bool = False


class ChoreRotationSettings(_SettingsSection):
    enabled: bool = False
    frequency: RotationFrequency = RotationFrequency.WEEKLY


class GeneralSettings(_SettingsSection):
    theme: Theme = Theme.LIGHT
    auto_approve_expenses: bool = False


class HouseholdSettings(_SettingsSection):
    """Preferences shared by the whole household."""

    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    chore_rotation: ChoreRotationSettings = Field(default_factory=ChoreRotationSettings)
    general: GeneralSettings = Field(default_factory=GeneralSettings)

    def as_dict(self) -> Dict[str, Any]:
        """Export with the camelCase keys used in storage."""

        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "HouseholdSettings":
        return cls.model_validate(dict(payload))


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def merge_settings(current: HouseholdSettings, partial: Mapping[str, Any]) -> HouseholdSettings:
    """Return ``current`` with ``partial`` merged in.

    ``partial`` maps section names (camelCase or snake_case) to dictionaries
    of option values; options not mentioned keep their current value. The
    merged result is validated, so unknown sections, unknown options and bad
    enum values raise ``pydantic.ValidationError``.
    """

    merged = current.as_dict()
    for section, values in partial.items():
        key = _camel(section)
        if isinstance(values, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **{_camel(name): value for name, value in values.items()}}
        else:
            merged[key] = values
    return HouseholdSettings.from_dict(merged)

"""Habit form definitions."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ...domain.habit import (
    Category,
    Difficulty,
    Frequency,
    Habit,
    RecurrenceRule,
    build_rule,
    rule_fields,
)
from ...errors import InvalidRuleError


def _split_days(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class HabitForm(BaseModel):
    """Form model for creating or editing a habit."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(default="", description="Short label for the habit", max_length=100)
    description: str = Field(default="", description="Optional details about the habit", max_length=400)
    category: Category = Field(default=Category.HEALTH, description="Category id")
    difficulty: Difficulty = Field(default=Difficulty.MEDIUM, description="Difficulty level")
    frequency: Frequency = Field(default=Frequency.DAILY, description="Habit frequency")
    weekly_days: list[int] = Field(
        default_factory=list,
        validation_alias=AliasChoices("weekly_days", "weeklyDays"),
        description="Weekdays, 0=Sunday",
    )
    monthly_days: list[int] = Field(
        default_factory=list,
        validation_alias=AliasChoices("monthly_days", "monthlyDays"),
        description="Days of the month",
    )
    custom_interval: int | None = Field(
        default=None,
        validation_alias=AliasChoices("custom_interval", "customInterval"),
        ge=1,
        le=365,
        description="Number of days between occurrences when using custom frequency",
    )
    target: float | None = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Ensure the habit name is present when validating submissions."""

        if not value or not value.strip():
            raise ValueError("Please provide a habit name.")
        return value

    @field_validator("weekly_days", "monthly_days", mode="before")
    @classmethod
    def split_days(cls, value: str | Iterable[int] | None) -> Any:
        """Accept comma-separated day strings as well as lists."""

        return _split_days(value)

    @field_validator("weekly_days")
    @classmethod
    def validate_weekdays(cls, value: list[int]) -> list[int]:
        if any(day < 0 or day > 6 for day in value):
            raise ValueError("Weekdays must be between 0 (Sunday) and 6 (Saturday).")
        return sorted(set(value))

    @field_validator("monthly_days")
    @classmethod
    def validate_month_days(cls, value: list[int]) -> list[int]:
        if any(day < 1 or day > 31 for day in value):
            raise ValueError("Days of the month must be between 1 and 31.")
        return sorted(set(value))

    @model_validator(mode="after")
    def ensure_rule_is_complete(self) -> "HabitForm":
        """Each frequency needs its own variant field filled in."""

        if self.frequency is Frequency.WEEKLY and not self.weekly_days:
            raise InvalidRuleError("Pick at least one weekday for a weekly habit.")
        if self.frequency is Frequency.MONTHLY and not self.monthly_days:
            raise InvalidRuleError("Pick at least one day of the month for a monthly habit.")
        if self.frequency is Frequency.CUSTOM and not self.custom_interval:
            raise InvalidRuleError("Set the number of days for a custom frequency.")
        return self

    def to_rule(self) -> RecurrenceRule:
        return build_rule(
            self.frequency.value,
            weekly_days=self.weekly_days,
            monthly_days=self.monthly_days,
            custom_interval=self.custom_interval,
        )

    def to_habit(self, habit_id: str, now: datetime) -> Habit:
        """Build a brand-new habit with no completions."""

        return Habit(
            id=habit_id,
            name=self.name,
            description=self.description,
            category=self.category,
            difficulty=self.difficulty,
            rule=self.to_rule(),
            target=self.target,
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def values_from_habit(habit: Habit) -> dict[str, Any]:
        """Current field values of ``habit``, suitable as a base for partial edits."""

        fields = rule_fields(habit.rule)
        return {
            "name": habit.name,
            "description": habit.description,
            "category": habit.category.value,
            "difficulty": habit.difficulty.value,
            "frequency": fields["frequency"],
            "weekly_days": fields["weekly_days"] or [],
            "monthly_days": fields["monthly_days"] or [],
            "custom_interval": fields["custom_interval"],
            "target": habit.target,
        }


# Record keys (camelCase) accepted in place of the form field names
_FIELD_BY_ALIAS = {
    choice: name
    for name, info in HabitForm.model_fields.items()
    if isinstance(info.validation_alias, AliasChoices)
    for choice in info.validation_alias.choices
    if isinstance(choice, str)
}


def canonical_payload(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Rename record keys to form field names; the field name wins when both are sent."""

    values: dict[str, Any] = {}
    for key, value in payload.items():
        field = _FIELD_BY_ALIAS.get(key, key)
        if field != key and field in payload:
            continue
        values[field] = value
    return values


def structure_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by field name."""

    structured: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        key = _FIELD_BY_ALIAS.get(str(loc[0]), str(loc[0])) if loc else "__root__"
        structured.setdefault(key, []).append(error.get("msg", "Invalid value"))
    return structured


def validate_payload(payload: Mapping[str, Any]) -> tuple[HabitForm | None, dict[str, list[str]]]:
    """Return the parsed form, or ``None`` plus field errors."""

    try:
        return HabitForm.model_validate(dict(payload)), {}
    except ValidationError as exc:
        return None, structure_errors(exc)


__all__ = ["HabitForm", "canonical_payload", "structure_errors", "validate_payload"]

"""Exception types raised at HabitMaster boundaries."""

from __future__ import annotations


class HabitMasterError(Exception):
    """Base class for all HabitMaster errors."""


class MalformedDateError(HabitMasterError, ValueError):
    """A date or instant string could not be parsed."""

    def __init__(self, value: object, *, field: str | None = None) -> None:
        self.value = value
        self.field = field
        where = f" in field '{field}'" if field else ""
        super().__init__(f"Malformed date{where}: {value!r}")


class InvalidRuleError(HabitMasterError, ValueError):
    """A recurrence rule was rejected during validation."""


class HabitNotFoundError(HabitMasterError, LookupError):
    """No habit exists for the requested id."""

    def __init__(self, habit_id: str) -> None:
        self.habit_id = habit_id
        super().__init__(f"Habit not found: {habit_id}")


__all__ = [
    "HabitMasterError",
    "HabitNotFoundError",
    "InvalidRuleError",
    "MalformedDateError",
]

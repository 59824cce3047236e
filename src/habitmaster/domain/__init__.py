"""Pure domain types for habits and calendar days."""

from .calendar import local_day, parse_day, parse_instant
from .habit import (
    Category,
    Completion,
    CustomRule,
    DailyRule,
    Difficulty,
    Frequency,
    Habit,
    MonthlyRule,
    RecurrenceRule,
    UnrecognizedRule,
    WeeklyRule,
    build_rule,
    toggle_completion,
)

__all__ = [
    "Category",
    "Completion",
    "CustomRule",
    "DailyRule",
    "Difficulty",
    "Frequency",
    "Habit",
    "MonthlyRule",
    "RecurrenceRule",
    "UnrecognizedRule",
    "WeeklyRule",
    "build_rule",
    "local_day",
    "parse_day",
    "parse_instant",
    "toggle_completion",
]

"""Recurrence evaluation: is a habit due on a given calendar day?

Custom-interval habits have two deliberately separate policies:

* point-in-time: due every ``interval`` days counted from the creation day.
  Used for "due today", historical rollups and completion rates.
* completion-gated: due once ``interval`` days have passed since the most
  recent completion (or immediately if never completed). Used to decide
  whether the habit still needs action right now.

The two disagree near completion boundaries; an early completion satisfies
the next window only under the completion-gated policy.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Collection

from ..constants.habits import weekday_short_label
from ..domain.calendar import days_between, sunday_weekday
from ..domain.habit import (
    CustomRule,
    DailyRule,
    MonthlyRule,
    RecurrenceRule,
    WeeklyRule,
)


class DuePolicy(str, Enum):
    POINT_IN_TIME = "point_in_time"
    COMPLETION_GATED = "completion_gated"


def _is_due_by_calendar(rule: RecurrenceRule, reference_date: date) -> bool | None:
    """Resolve rules that do not depend on an anchor; None for custom rules."""
    if isinstance(rule, DailyRule):
        return True
    if isinstance(rule, WeeklyRule):
        # Empty day-sets fail closed.
        return sunday_weekday(reference_date) in rule.days
    if isinstance(rule, MonthlyRule):
        return reference_date.day in rule.days
    if isinstance(rule, CustomRule):
        return None
    # Unknown kinds fail open so newer records stay actionable.
    return True


def is_due_point_in_time(
    rule: RecurrenceRule,
    reference_date: date,
    created_on: date,
) -> bool:
    """Due-ness anchored to the creation day."""
    by_calendar = _is_due_by_calendar(rule, reference_date)
    if by_calendar is not None:
        return by_calendar

    elapsed = days_between(reference_date, created_on)
    if elapsed < 0:
        return False
    return elapsed % rule.interval == 0


def is_due_by_completion_gap(
    rule: RecurrenceRule,
    reference_date: date,
    completion_dates: Collection[date] = (),
) -> bool:
    """Due-ness anchored to the most recent completion on or before the day."""
    by_calendar = _is_due_by_calendar(rule, reference_date)
    if by_calendar is not None:
        return by_calendar

    past = [d for d in completion_dates if d <= reference_date]
    if not past:
        return True
    return days_between(reference_date, max(past)) >= rule.interval


def is_due_on(
    rule: RecurrenceRule,
    reference_date: date,
    created_on: date,
    completion_dates: Collection[date] = (),
    policy: DuePolicy = DuePolicy.POINT_IN_TIME,
) -> bool:
    """Return True when a habit with ``rule`` is due on ``reference_date``."""
    if policy is DuePolicy.COMPLETION_GATED:
        return is_due_by_completion_gap(rule, reference_date, completion_dates)
    return is_due_point_in_time(rule, reference_date, created_on)


def describe_rule(rule: RecurrenceRule) -> str:
    """Short label for cards and email previews."""
    if isinstance(rule, WeeklyRule):
        return ", ".join(weekday_short_label(d) for d in sorted(rule.days))
    if isinstance(rule, MonthlyRule):
        return f"{', '.join(str(d) for d in sorted(rule.days))}th of month"
    if isinstance(rule, CustomRule):
        return f"Every {rule.interval} days"
    return "Daily"


__all__ = [
    "DuePolicy",
    "describe_rule",
    "is_due_by_completion_gap",
    "is_due_on",
    "is_due_point_in_time",
]

"""Habit streak and completion statistics.

Every function takes "now" explicitly and never reads the wall clock, so
results depend only on the habit snapshot and the supplied instant.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ..constants.habits import MILESTONE_DAYS, Milestone, get_milestone
from ..domain.calendar import NowLike, iter_days, local_day
from ..domain.habit import Habit
from ..logging_config import get_logger
from .recurrence import DuePolicy, is_due_on, is_due_point_in_time

logger = get_logger("services.habits")

DEFAULT_RATE_WINDOW_DAYS = 30
_ONE_DAY = timedelta(days=1)


def percent(part: int, whole: int) -> int:
    """Integer percentage rounded half-up; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    ratio = Decimal(100 * part) / Decimal(whole)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def is_completed_on(habit: Habit, day: date) -> bool:
    return day in habit.completion_dates


def is_due_today(habit: Habit, now: NowLike, tz: Optional[tzinfo] = None) -> bool:
    """Point-in-time due check for the current day."""
    return is_due_point_in_time(habit.rule, local_day(now, tz), habit.created_day(tz))


def needs_action(habit: Habit, now: NowLike, tz: Optional[tzinfo] = None) -> bool:
    """True when the habit is due by completion gap and not yet done today."""
    today = local_day(now, tz)
    done = habit.completion_dates
    if today in done:
        return False
    return is_due_on(
        habit.rule,
        today,
        habit.created_day(tz),
        done,
        policy=DuePolicy.COMPLETION_GATED,
    )


def current_streak(habit: Habit, now: NowLike, tz: Optional[tzinfo] = None) -> int:
    """Consecutive completed days ending today, or yesterday if today is open."""

    today = local_day(now, tz)
    days = sorted(habit.completion_dates, reverse=True)
    if not days:
        return 0

    # An unfinished today does not break the streak, it just isn't counted.
    cursor = today if today in habit.completion_dates else today - _ONE_DAY
    streak = 0
    for day in days:
        if day > cursor:
            continue
        if day == cursor:
            streak += 1
            cursor = cursor - _ONE_DAY
        else:
            break
    return streak


def longest_streak(habit: Habit) -> int:
    """Longest run of consecutive completed days in the whole history."""

    days = sorted(habit.completion_dates)
    if not days:
        return 0

    longest = 1
    run = 1
    for previous, day in zip(days, days[1:]):
        if (day - previous).days == 1:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def completion_rate(
    habit: Habit,
    now: NowLike,
    window_days: int = DEFAULT_RATE_WINDOW_DAYS,
    tz: Optional[tzinfo] = None,
) -> int:
    """Percent of due days completed from ``now - window_days`` through ``now``."""

    today = local_day(now, tz)
    created_on = habit.created_day(tz)
    done = habit.completion_dates

    expected = 0
    completed = 0
    for day in iter_days(today - timedelta(days=max(window_days, 0)), today):
        if not is_due_point_in_time(habit.rule, day, created_on):
            continue
        expected += 1
        if day in done:
            completed += 1
    return percent(completed, expected)


def next_milestone(streak: int) -> Optional[int]:
    """Smallest milestone strictly above ``streak``; None past the last one."""
    for days in MILESTONE_DAYS:
        if days > streak:
            return days
    return None


def next_milestone_info(streak: int) -> Optional[Milestone]:
    days = next_milestone(streak)
    return get_milestone(days) if days is not None else None


@dataclass(frozen=True)
class HabitStatistics:
    """Derived, never-persisted view of a single habit."""

    habit_id: str
    current_streak: int
    longest_streak: int
    completion_rate: int
    is_due_today: bool
    is_completed_today: bool
    needs_action: bool
    next_milestone: Optional[int]
    next_milestone_title: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "habit_id": self.habit_id,
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "completion_rate": self.completion_rate,
            "is_due_today": self.is_due_today,
            "is_completed_today": self.is_completed_today,
            "needs_action": self.needs_action,
            "next_milestone": self.next_milestone,
            "next_milestone_title": self.next_milestone_title,
        }


def habit_statistics(
    habit: Habit,
    now: NowLike,
    window_days: int = DEFAULT_RATE_WINDOW_DAYS,
    tz: Optional[tzinfo] = None,
) -> HabitStatistics:
    today = local_day(now, tz)
    streak = current_streak(habit, today, tz)
    milestone = next_milestone_info(streak)
    stats = HabitStatistics(
        habit_id=habit.id,
        current_streak=streak,
        longest_streak=longest_streak(habit),
        completion_rate=completion_rate(habit, today, window_days, tz),
        is_due_today=is_due_today(habit, today, tz),
        is_completed_today=is_completed_on(habit, today),
        needs_action=needs_action(habit, today, tz),
        next_milestone=next_milestone(streak),
        next_milestone_title=milestone.title if milestone else None,
    )
    logger.debug("Computed habit statistics", extra=stats.to_dict())
    return stats


def sort_habits(
    habits: Iterable[Habit],
    sort_by: str = "name",
    *,
    now: NowLike,
    tz: Optional[tzinfo] = None,
    window_days: int = DEFAULT_RATE_WINDOW_DAYS,
) -> list[Habit]:
    """Return a new list ordered for display."""

    items = list(habits)
    if sort_by == "name":
        return sorted(items, key=lambda h: h.name.casefold())
    if sort_by == "streak":
        return sorted(items, key=lambda h: current_streak(h, now, tz), reverse=True)
    if sort_by == "completion":
        return sorted(items, key=lambda h: completion_rate(h, now, window_days, tz), reverse=True)
    if sort_by == "created":
        return sorted(items, key=lambda h: h.created_at, reverse=True)
    if sort_by == "category":
        return sorted(items, key=lambda h: h.category.value)
    logger.debug("Unknown sort key, keeping input order", extra={"sort_by": sort_by})
    return items


__all__ = [
    "DEFAULT_RATE_WINDOW_DAYS",
    "HabitStatistics",
    "completion_rate",
    "current_streak",
    "habit_statistics",
    "is_completed_on",
    "is_due_today",
    "longest_streak",
    "needs_action",
    "next_milestone",
    "next_milestone_info",
    "percent",
    "round_half_up",
    "sort_habits",
]

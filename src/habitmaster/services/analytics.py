"""Aggregate rollups across a user's habits."""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import date, timedelta, tzinfo
from typing import Iterable, Mapping, Optional, Union

from ..domain.calendar import NowLike, format_day, iter_days, local_day
from ..domain.habit import Habit
from ..logging_config import get_logger
from .habits import (
    DEFAULT_RATE_WINDOW_DAYS,
    completion_rate,
    current_streak,
    needs_action,
    percent,
    round_half_up,
)
from .recurrence import is_due_point_in_time

logger = get_logger("services.analytics")

HabitCollection = Union[Iterable[Habit], Mapping[str, Habit]]


def as_habit_list(habits: HabitCollection) -> list[Habit]:
    if isinstance(habits, Mapping):
        return list(habits.values())
    return list(habits)


@dataclass(frozen=True)
class DayTrend:
    """Due and completed counts for one calendar day."""

    date: date
    total_due: int
    completed: int
    rate: int

    def to_dict(self) -> dict:
        return {
            "date": format_day(self.date),
            "total_due": self.total_due,
            "completed": self.completed,
            "rate": self.rate,
        }


@dataclass(frozen=True)
class TodayRollup:
    total_habits: int = 0
    due_today: int = 0
    completed_today: int = 0
    needs_action: int = 0
    completion_percentage: int = 0
    longest_current_streak: int = 0
    average_streak: int = 0
    average_completion_rate: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class HabitStreakSummary:
    habit_id: str
    name: str
    current_streak: int
    category: str


@dataclass(frozen=True)
class HabitAnalytics:
    total_habits: int = 0
    max_streak: int = 0
    average_streak: int = 0
    habit_streaks: list[HabitStreakSummary] = field(default_factory=list)
    category_breakdown: dict[str, int] = field(default_factory=dict)
    daily: list[DayTrend] = field(default_factory=list)
    overall_consistency: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_habits": self.total_habits,
            "max_streak": self.max_streak,
            "average_streak": self.average_streak,
            "habit_streaks": [asdict(s) for s in self.habit_streaks],
            "category_breakdown": dict(self.category_breakdown),
            "daily": [d.to_dict() for d in self.daily],
            "overall_consistency": self.overall_consistency,
        }


def day_trend(habits: list[Habit], day: date, tz: Optional[tzinfo] = None) -> DayTrend:
    """Count what was due on ``day`` by each habit's own rule, and what got done."""
    due = 0
    completed = 0
    for habit in habits:
        if not is_due_point_in_time(habit.rule, day, habit.created_day(tz)):
            continue
        due += 1
        if day in habit.completion_dates:
            completed += 1
    return DayTrend(date=day, total_due=due, completed=completed, rate=percent(completed, due))


def today_rollup(
    habits: HabitCollection,
    now: NowLike,
    tz: Optional[tzinfo] = None,
    window_days: int = DEFAULT_RATE_WINDOW_DAYS,
) -> TodayRollup:
    """Dashboard totals for the current day."""

    items = as_habit_list(habits)
    if not items:
        return TodayRollup()

    today = local_day(now, tz)
    trend = day_trend(items, today, tz)
    streaks = [current_streak(h, today) for h in items]
    rates = [completion_rate(h, today, window_days, tz) for h in items]
    pending = sum(1 for h in items if needs_action(h, today, tz))

    rollup = TodayRollup(
        total_habits=len(items),
        due_today=trend.total_due,
        completed_today=trend.completed,
        needs_action=pending,
        completion_percentage=trend.rate,
        longest_current_streak=max(streaks),
        average_streak=round_half_up(sum(streaks) / len(streaks)),
        average_completion_rate=round_half_up(sum(rates) / len(rates)),
    )
    logger.debug("Computed today rollup", extra={"rollup": rollup.to_dict()})
    return rollup


def weekly_trend(
    habits: HabitCollection,
    now: NowLike,
    days: int = 7,
    tz: Optional[tzinfo] = None,
) -> list[DayTrend]:
    """Trailing per-day trend ending today, oldest first."""

    items = as_habit_list(habits)
    today = local_day(now, tz)
    start = today - timedelta(days=max(days, 1) - 1)
    return [day_trend(items, day, tz) for day in iter_days(start, today)]


def habit_analytics(
    habits: HabitCollection,
    now: NowLike,
    range_days: int = 30,
    tz: Optional[tzinfo] = None,
) -> HabitAnalytics:
    """Per-habit streaks, category breakdown and daily completion over a range."""

    items = as_habit_list(habits)
    if not items:
        return HabitAnalytics()

    today = local_day(now, tz)
    summaries = [
        HabitStreakSummary(
            habit_id=h.id,
            name=h.name,
            current_streak=current_streak(h, today),
            category=h.category.value,
        )
        for h in items
    ]
    breakdown = Counter(h.category.value for h in items)
    daily = weekly_trend(items, today, days=range_days, tz=tz)

    total_due = sum(d.total_due for d in daily)
    total_done = sum(d.completed for d in daily)
    consistency = (total_done / total_due) * 100 if total_due else 0.0
    streak_values = [s.current_streak for s in summaries]

    return HabitAnalytics(
        total_habits=len(items),
        max_streak=max(streak_values),
        average_streak=round_half_up(sum(streak_values) / len(streak_values)),
        habit_streaks=summaries,
        category_breakdown=dict(breakdown),
        daily=daily,
        overall_consistency=consistency,
    )


__all__ = [
    "DayTrend",
    "HabitAnalytics",
    "HabitStreakSummary",
    "TodayRollup",
    "as_habit_list",
    "day_trend",
    "habit_analytics",
    "today_rollup",
    "weekly_trend",
]

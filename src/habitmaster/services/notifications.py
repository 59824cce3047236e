"""Daily reminder email classification.

Nothing here sends mail. The email collaborator calls :func:`email_preview`
to learn whether today's reminder is warranted and what it should list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time, tzinfo
from typing import Optional

from ..config import BaseConfig
from ..domain.calendar import NowLike, local_day
from ..domain.habit import Habit
from ..logging_config import get_logger
from .analytics import HabitCollection, as_habit_list
from .recurrence import describe_rule, is_due_point_in_time

logger = get_logger("services.notifications")


@dataclass(frozen=True)
class ReminderSettings:
    enabled: bool
    time: time
    timezone: str


@dataclass(frozen=True)
class EmailPreview:
    total_habits: int = 0
    completed_today: int = 0
    pending_today: int = 0
    due_habits: list[Habit] = field(default_factory=list)
    completed_habits: list[Habit] = field(default_factory=list)

    @property
    def would_send_email(self) -> bool:
        return self.pending_today > 0 or self.completed_today > 0

    def to_dict(self) -> dict:
        def _line(habit: Habit) -> dict:
            return {"id": habit.id, "name": habit.name, "schedule": describe_rule(habit.rule)}

        return {
            "total_habits": self.total_habits,
            "completed_today": self.completed_today,
            "pending_today": self.pending_today,
            "due_habits": [_line(h) for h in self.due_habits],
            "completed_habits": [_line(h) for h in self.completed_habits],
            "would_send_email": self.would_send_email,
        }


def email_preview(habits: HabitCollection, now: NowLike, tz: Optional[tzinfo] = None) -> EmailPreview:
    """Split today's due habits into pending and completed."""

    items = as_habit_list(habits)
    today = local_day(now, tz)

    pending: list[Habit] = []
    completed: list[Habit] = []
    for habit in items:
        if not is_due_point_in_time(habit.rule, today, habit.created_day(tz)):
            continue
        if today in habit.completion_dates:
            completed.append(habit)
        else:
            pending.append(habit)

    preview = EmailPreview(
        total_habits=len(items),
        completed_today=len(completed),
        pending_today=len(pending),
        due_habits=pending,
        completed_habits=completed,
    )
    logger.info(
        "Email preview classified",
        extra={
            "day": today.isoformat(),
            "pending": preview.pending_today,
            "completed": preview.completed_today,
            "would_send": preview.would_send_email,
        },
    )
    return preview


def reminder_settings(config: BaseConfig) -> ReminderSettings:
    return ReminderSettings(
        enabled=config.EMAIL_REMINDERS_ENABLED,
        time=config.EMAIL_REMINDER_TIME,
        timezone=config.TIMEZONE_NAME,
    )


__all__ = ["EmailPreview", "ReminderSettings", "email_preview", "reminder_settings"]

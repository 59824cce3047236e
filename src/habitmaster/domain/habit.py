"""Habit data model: recurrence rules, completions and habit snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, tzinfo
from enum import Enum
from functools import cached_property
from typing import Any, Iterable, Mapping, Optional, Union

from ..constants.habits import get_category, get_difficulty
from ..logging_config import get_logger
from .calendar import format_day, format_instant, local_day, parse_day, parse_instant

logger = get_logger("domain.habit")


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class Category(str, Enum):
    HEALTH = "health"
    LEARNING = "learning"
    PRODUCTIVITY = "productivity"
    MINDFULNESS = "mindfulness"
    SOCIAL = "social"
    CREATIVITY = "creativity"
    LIFESTYLE = "lifestyle"
    OTHER = "other"

    @classmethod
    def resolve(cls, value: Optional[str]) -> "Category":
        """Map a stored id onto a category, falling back to the first entry."""
        if isinstance(value, cls):
            return value
        return cls(get_category(value).id)


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def resolve(cls, value: Optional[str]) -> "Difficulty":
        if isinstance(value, cls):
            return value
        return cls(get_difficulty(value).value)


# ---------------------------------------------------------------------------
# Recurrence rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DailyRule:
    """Due every day."""

    frequency = Frequency.DAILY.value


@dataclass(frozen=True)
class WeeklyRule:
    """Due on the listed weekdays (0=Sunday .. 6=Saturday)."""

    days: frozenset[int] = frozenset()
    frequency = Frequency.WEEKLY.value

    def __post_init__(self) -> None:
        object.__setattr__(self, "days", frozenset(int(d) for d in self.days if 0 <= int(d) <= 6))


@dataclass(frozen=True)
class MonthlyRule:
    """Due on the listed days of the month (1..31, no rollover)."""

    days: frozenset[int] = frozenset()
    frequency = Frequency.MONTHLY.value

    def __post_init__(self) -> None:
        object.__setattr__(self, "days", frozenset(int(d) for d in self.days if 1 <= int(d) <= 31))


@dataclass(frozen=True)
class CustomRule:
    """Due every ``interval`` days; non-positive intervals clamp to 1."""

    interval: int = 1
    frequency = Frequency.CUSTOM.value

    def __post_init__(self) -> None:
        object.__setattr__(self, "interval", max(1, int(self.interval)))


@dataclass(frozen=True)
class UnrecognizedRule:
    """A frequency this version does not understand; always treated as due."""

    frequency: str = ""


RecurrenceRule = Union[DailyRule, WeeklyRule, MonthlyRule, CustomRule, UnrecognizedRule]


def build_rule(
    frequency: Optional[str],
    weekly_days: Optional[Iterable[int]] = None,
    monthly_days: Optional[Iterable[int]] = None,
    custom_interval: Optional[int] = None,
) -> RecurrenceRule:
    """Build a rule from the stored discriminator and its variant fields."""

    kind = (frequency or "").strip().lower()
    if kind == Frequency.DAILY.value:
        return DailyRule()
    if kind == Frequency.WEEKLY.value:
        return WeeklyRule(frozenset(weekly_days or ()))
    if kind == Frequency.MONTHLY.value:
        return MonthlyRule(frozenset(monthly_days or ()))
    if kind == Frequency.CUSTOM.value:
        return CustomRule(custom_interval if custom_interval is not None else 1)
    logger.warning("Unrecognized habit frequency; treating as always due", extra={"frequency": frequency})
    return UnrecognizedRule(frequency or "")


def rule_fields(rule: RecurrenceRule) -> dict[str, Any]:
    """Flatten a rule back into its storage fields."""

    fields: dict[str, Any] = {
        "frequency": rule.frequency,
        "weekly_days": None,
        "monthly_days": None,
        "custom_interval": None,
    }
    if isinstance(rule, WeeklyRule):
        fields["weekly_days"] = sorted(rule.days)
    elif isinstance(rule, MonthlyRule):
        fields["monthly_days"] = sorted(rule.days)
    elif isinstance(rule, CustomRule):
        fields["custom_interval"] = rule.interval
    return fields


# ---------------------------------------------------------------------------
# Completions and habits
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Completion:
    """A habit performed on one calendar day."""

    date: date
    timestamp: Optional[datetime] = None
    value: float = 1.0

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Completion":
        raw_ts = record.get("timestamp")
        raw_value = record.get("value")
        return cls(
            date=parse_day(record.get("date"), field="completions.date"),
            timestamp=parse_instant(raw_ts, field="completions.timestamp") if raw_ts else None,
            value=float(raw_value) if raw_value is not None else 1.0,
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "date": format_day(self.date),
            "timestamp": format_instant(self.timestamp) if self.timestamp else None,
            "value": self.value,
        }


@dataclass(frozen=True)
class Habit:
    """Immutable snapshot of a habit and its completion set."""

    id: str
    name: str
    rule: RecurrenceRule
    created_at: datetime
    updated_at: Optional[datetime] = None
    description: str = ""
    category: Category = Category.HEALTH
    difficulty: Difficulty = Difficulty.MEDIUM
    target: Optional[float] = None
    completions: tuple[Completion, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", Category.resolve(self.category))
        object.__setattr__(self, "difficulty", Difficulty.resolve(self.difficulty))
        ordered = tuple(sorted(self.completions, key=lambda c: c.date))
        for earlier, later in zip(ordered, ordered[1:]):
            if earlier.date == later.date:
                raise ValueError(f"Habit {self.id} has two completions on {earlier.date.isoformat()}")
        object.__setattr__(self, "completions", ordered)

    @property
    def frequency(self) -> str:
        return self.rule.frequency

    @property
    def created_on(self) -> date:
        return self.created_at.date()

    def created_day(self, tz: Optional[tzinfo] = None) -> date:
        """Creation day in the reference timezone."""
        return local_day(self.created_at, tz)

    @cached_property
    def completion_dates(self) -> frozenset[date]:
        return frozenset(c.date for c in self.completions)

    def completion_on(self, day: date) -> Optional[Completion]:
        for completion in self.completions:
            if completion.date == day:
                return completion
        return None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Habit":
        """Parse a stored habit record (camelCase or snake_case keys).

        Raises:
            MalformedDateError: when any date or instant is unparseable.
        """

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in record and record[key] is not None:
                    return record[key]
            return default

        habit_id = str(pick("id", default=""))
        rule = build_rule(
            pick("frequency"),
            weekly_days=pick("weeklyDays", "weekly_days"),
            monthly_days=pick("monthlyDays", "monthly_days"),
            custom_interval=pick("customInterval", "custom_interval"),
        )

        completions: dict[date, Completion] = {}
        for raw in pick("completions", default=()) or ():
            completion = Completion.from_record(raw)
            if completion.date in completions:
                logger.warning(
                    "Dropping duplicate completion",
                    extra={"habit_id": habit_id, "date": completion.date.isoformat()},
                )
                continue
            completions[completion.date] = completion

        updated_raw = pick("updatedAt", "updated_at")
        target = pick("target")
        return cls(
            id=habit_id,
            name=str(pick("name", default="")),
            description=str(pick("description", default="")),
            category=pick("category"),
            difficulty=pick("difficulty"),
            rule=rule,
            target=float(target) if target is not None else None,
            created_at=parse_instant(pick("createdAt", "created_at", default=""), field="createdAt"),
            updated_at=parse_instant(updated_raw, field="updatedAt") if updated_raw else None,
            completions=tuple(completions.values()),
        )

    def to_record(self) -> dict[str, Any]:
        fields = rule_fields(self.rule)
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "difficulty": self.difficulty.value,
            "frequency": fields["frequency"],
            "weeklyDays": fields["weekly_days"],
            "monthlyDays": fields["monthly_days"],
            "customInterval": fields["custom_interval"],
            "target": self.target,
            "createdAt": format_instant(self.created_at),
            "updatedAt": format_instant(self.updated_at) if self.updated_at else None,
            "completions": [c.to_record() for c in self.completions],
        }


def toggle_completion(habit: Habit, day: date, now: datetime) -> Habit:
    """Return a copy of ``habit`` with the completion for ``day`` flipped.

    An existing completion on ``day`` is removed; otherwise one is added with
    the habit's target as its value (or 1).
    """
    if day in habit.completion_dates:
        completions = tuple(c for c in habit.completions if c.date != day)
    else:
        added = Completion(date=day, timestamp=now, value=habit.target or 1.0)
        completions = habit.completions + (added,)
    return replace(habit, completions=completions, updated_at=now)


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
    "rule_fields",
    "toggle_completion",
]

"""
Static habit catalogs shared by forms, statistics and the email preview.

Lookups fall back to the first entry of a catalog when a key is unknown, so
records written by newer clients still resolve to something displayable.
"""

from __future__ import annotations

from typing import NamedTuple, Optional


class CategoryInfo(NamedTuple):
    id: str
    name: str
    color: str
    icon: str


class DifficultyInfo(NamedTuple):
    value: str
    label: str
    color: str
    description: str


class FrequencyInfo(NamedTuple):
    value: str
    label: str
    description: str


class WeekdayInfo(NamedTuple):
    value: int
    label: str
    short: str


class Milestone(NamedTuple):
    days: int
    title: str
    reward: str


class HabitSuggestion(NamedTuple):
    name: str
    category: str
    difficulty: str


HABIT_CATEGORIES = [
    CategoryInfo("health", "Health & Fitness", "#10b981", "🏃"),
    CategoryInfo("learning", "Learning", "#3b82f6", "📚"),
    CategoryInfo("productivity", "Productivity", "#8b5cf6", "⚡"),
    CategoryInfo("mindfulness", "Mindfulness", "#06b6d4", "🧘"),
    CategoryInfo("social", "Social", "#f59e0b", "👥"),
    CategoryInfo("creativity", "Creativity", "#ef4444", "🎨"),
    CategoryInfo("lifestyle", "Lifestyle", "#84cc16", "🌱"),
    CategoryInfo("other", "Other", "#6b7280", "📝"),
]

HABIT_FREQUENCIES = [
    FrequencyInfo("daily", "Daily", "Every day"),
    FrequencyInfo("weekly", "Weekly", "Specific days of the week"),
    FrequencyInfo("monthly", "Monthly", "Specific days of the month"),
    FrequencyInfo("custom", "Custom", "Custom interval"),
]

# Sunday-first, matching the stored weeklyDays indices
DAYS_OF_WEEK = [
    WeekdayInfo(0, "Sunday", "Sun"),
    WeekdayInfo(1, "Monday", "Mon"),
    WeekdayInfo(2, "Tuesday", "Tue"),
    WeekdayInfo(3, "Wednesday", "Wed"),
    WeekdayInfo(4, "Thursday", "Thu"),
    WeekdayInfo(5, "Friday", "Fri"),
    WeekdayInfo(6, "Saturday", "Sat"),
]

DIFFICULTY_LEVELS = [
    DifficultyInfo("easy", "Easy", "#10b981", "Low effort required"),
    DifficultyInfo("medium", "Medium", "#f59e0b", "Moderate effort"),
    DifficultyInfo("hard", "Hard", "#ef4444", "High effort required"),
]

HABIT_SUGGESTIONS = [
    HabitSuggestion("Drink 8 glasses of water", "health", "easy"),
    HabitSuggestion("Read for 30 minutes", "learning", "medium"),
    HabitSuggestion("Exercise for 30 minutes", "health", "medium"),
    HabitSuggestion("Meditate for 10 minutes", "mindfulness", "easy"),
    HabitSuggestion("Write in journal", "creativity", "easy"),
    HabitSuggestion("Learn a new language", "learning", "hard"),
    HabitSuggestion("Take a walk", "health", "easy"),
    HabitSuggestion("Practice gratitude", "mindfulness", "easy"),
    HabitSuggestion("Call a friend or family member", "social", "easy"),
    HabitSuggestion("Organize workspace", "productivity", "medium"),
]

STREAK_MILESTONES = [
    Milestone(3, "Getting Started!", "🌱"),
    Milestone(7, "One Week Strong!", "⭐"),
    Milestone(14, "Two Weeks Champion!", "🏆"),
    Milestone(30, "Monthly Master!", "🎯"),
    Milestone(60, "Momentum Builder!", "🚀"),
    Milestone(100, "Century Club!", "💎"),
    Milestone(365, "Year-Long Legend!", "👑"),
]

MILESTONE_DAYS = tuple(m.days for m in STREAK_MILESTONES)

_CATEGORIES_BY_ID = {c.id: c for c in HABIT_CATEGORIES}
_DIFFICULTIES_BY_VALUE = {d.value: d for d in DIFFICULTY_LEVELS}
_MILESTONES_BY_DAYS = {m.days: m for m in STREAK_MILESTONES}


def get_category(category_id: Optional[str]) -> CategoryInfo:
    """Return the category for ``category_id`` or the first category."""
    return _CATEGORIES_BY_ID.get(category_id or "", HABIT_CATEGORIES[0])


def get_difficulty(value: Optional[str]) -> DifficultyInfo:
    """Return the difficulty level for ``value`` or the first level."""
    return _DIFFICULTIES_BY_VALUE.get(value or "", DIFFICULTY_LEVELS[0])


def get_milestone(days: int) -> Optional[Milestone]:
    return _MILESTONES_BY_DAYS.get(days)


def weekday_short_label(index: int) -> str:
    return DAYS_OF_WEEK[index % 7].short

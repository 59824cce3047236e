"""Static configuration tables."""

from .habits import (
    DAYS_OF_WEEK,
    DIFFICULTY_LEVELS,
    HABIT_CATEGORIES,
    HABIT_FREQUENCIES,
    HABIT_SUGGESTIONS,
    MILESTONE_DAYS,
    STREAK_MILESTONES,
    get_category,
    get_difficulty,
    get_milestone,
)

__all__ = [
    "DAYS_OF_WEEK",
    "DIFFICULTY_LEVELS",
    "HABIT_CATEGORIES",
    "HABIT_FREQUENCIES",
    "HABIT_SUGGESTIONS",
    "MILESTONE_DAYS",
    "STREAK_MILESTONES",
    "get_category",
    "get_difficulty",
    "get_milestone",
]

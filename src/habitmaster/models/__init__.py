"""SQLModel table exports."""

from .habit import CompletionRecord, HabitRecord

__all__ = ["CompletionRecord", "HabitRecord"]

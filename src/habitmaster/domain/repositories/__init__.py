"""Repository protocols for the persistence boundary."""

from .habit import HabitRepository

__all__ = ["HabitRepository"]

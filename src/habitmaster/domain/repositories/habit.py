"""Habit repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ..habit import Habit


class HabitRepository(Protocol):
    """Supplies complete habit snapshots and stores edited ones."""

    def list_habits(self) -> dict[str, Habit]:
        """Return every habit keyed by id."""
        ...

    def get(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by id."""
        ...

    def save(self, habit: Habit) -> Habit:
        """Insert or replace a habit together with its completions."""
        ...

    def delete(self, habit_id: str) -> None:
        """Delete a habit and its completions."""
        ...

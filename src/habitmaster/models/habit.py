"""Habit persistence tables."""

from __future__ import annotations

from datetime import date, datetime
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel


class HabitRecord(SQLModel, table=True):
    """Stored habit definition; the recurrence rule is flattened into columns."""

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(primary_key=True, max_length=64)
    name: str = Field(nullable=False, max_length=100, index=True)
    description: str = Field(default="", max_length=400)
    category: str = Field(default="health", max_length=32)
    difficulty: str = Field(default="medium", max_length=16)
    frequency: str = Field(default="daily", max_length=16)
    weekly_days: str = Field(default="", max_length=32)  # CSV "1,3,5"
    monthly_days: str = Field(default="", max_length=128)  # CSV "1,15"
    custom_interval: Optional[int] = Field(default=None)
    target: Optional[float] = Field(default=None)
    created_at: datetime = Field(nullable=False)
    updated_at: Optional[datetime] = Field(default=None)

    completions: list["CompletionRecord"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "CompletionRecord",
            back_populates="habit",
            cascade="all, delete-orphan",
        ),
    )


class CompletionRecord(SQLModel, table=True):
    """One completion per habit per calendar day."""

    __tablename__: ClassVar[str] = "habit_completion"

    habit_id: str = Field(foreign_key="habit.id", primary_key=True)
    occurred_on: date = Field(primary_key=True, index=True)
    recorded_at: Optional[datetime] = Field(default=None)
    value: float = Field(default=1.0, nullable=False)

    habit: Optional[HabitRecord] = Relationship(
        back_populates="completions",
        sa_relationship=relationship("HabitRecord", back_populates="completions"),
    )

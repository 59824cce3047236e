"""SQLModel implementation of the habit repository."""

from __future__ import annotations

from datetime import timezone
from typing import Optional

from sqlalchemy import delete
from sqlmodel import Session, select

from ...domain.calendar import parse_instant
from ...domain.habit import Completion, Habit, build_rule, rule_fields
from ...logging_config import get_logger
from ...models.habit import CompletionRecord, HabitRecord
from ..database import SessionFactory

logger = get_logger("infra.repositories.habit")


def _csv_to_days(value: str) -> list[int]:
    if not value or not value.strip():
        return []
    return [int(part) for part in value.split(",") if part.strip()]


def _days_to_csv(days: Optional[list[int]]) -> str:
    return ",".join(str(d) for d in sorted(set(days or [])))


def _to_utc(value):
    if value is None:
        return None
    return parse_instant(value).astimezone(timezone.utc)


def habit_from_rows(row: HabitRecord, completions: list[CompletionRecord]) -> Habit:
    """Build a domain snapshot from stored rows."""
    return Habit(
        id=row.id,
        name=row.name,
        description=row.description,
        category=row.category,
        difficulty=row.difficulty,
        rule=build_rule(
            row.frequency,
            weekly_days=_csv_to_days(row.weekly_days),
            monthly_days=_csv_to_days(row.monthly_days),
            custom_interval=row.custom_interval,
        ),
        target=row.target,
        # SQLite drops tzinfo; stored instants are UTC.
        created_at=parse_instant(row.created_at, field="created_at"),
        updated_at=parse_instant(row.updated_at, field="updated_at") if row.updated_at else None,
        completions=tuple(
            Completion(
                date=c.occurred_on,
                timestamp=parse_instant(c.recorded_at) if c.recorded_at else None,
                value=c.value,
            )
            for c in completions
        ),
    )


def _apply_habit(row: HabitRecord, habit: Habit) -> HabitRecord:
    fields = rule_fields(habit.rule)
    row.name = habit.name
    row.description = habit.description
    row.category = habit.category.value
    row.difficulty = habit.difficulty.value
    row.frequency = fields["frequency"]
    row.weekly_days = _days_to_csv(fields["weekly_days"])
    row.monthly_days = _days_to_csv(fields["monthly_days"])
    row.custom_interval = fields["custom_interval"]
    row.target = habit.target
    row.created_at = _to_utc(habit.created_at)
    row.updated_at = _to_utc(habit.updated_at)
    return row


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def _load(self, session: Session, row: HabitRecord) -> Habit:
        completions = list(
            session.exec(
                select(CompletionRecord)
                .where(CompletionRecord.habit_id == row.id)
                .order_by(CompletionRecord.occurred_on)  # type: ignore[arg-type]
            ).all()
        )
        return habit_from_rows(row, completions)

    def list_habits(self) -> dict[str, Habit]:
        """Return every habit keyed by id, with completions attached."""
        with self.session_factory() as session:
            rows = session.exec(select(HabitRecord).order_by(HabitRecord.name)).all()  # type: ignore[arg-type]
            return {row.id: self._load(session, row) for row in rows}

    def get(self, habit_id: str) -> Optional[Habit]:
        with self.session_factory() as session:
            row = session.get(HabitRecord, habit_id)
            if row is None:
                return None
            return self._load(session, row)

    def save(self, habit: Habit) -> Habit:
        """Insert or replace a habit; the stored completion set mirrors the snapshot."""
        with self.session_factory() as session:
            row = session.get(HabitRecord, habit.id)
            if row is None:
                row = HabitRecord(id=habit.id, name=habit.name, created_at=_to_utc(habit.created_at))
            session.add(_apply_habit(row, habit))

            session.execute(delete(CompletionRecord).where(CompletionRecord.habit_id == habit.id))
            for completion in habit.completions:
                session.add(
                    CompletionRecord(
                        habit_id=habit.id,
                        occurred_on=completion.date,
                        recorded_at=_to_utc(completion.timestamp),
                        value=completion.value,
                    )
                )
            session.flush()
            logger.info(
                "Saved habit",
                extra={"habit_id": habit.id, "completions": len(habit.completions)},
            )
            return self._load(session, row)

    def delete(self, habit_id: str) -> None:
        with self.session_factory() as session:
            session.execute(delete(CompletionRecord).where(CompletionRecord.habit_id == habit_id))
            row = session.get(HabitRecord, habit_id)
            if row is not None:
                session.delete(row)
                logger.info("Deleted habit", extra={"habit_id": habit_id})

"""Flask CLI commands for HabitMaster."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import click
from flask import current_app

from .constants.habits import HABIT_SUGGESTIONS
from .domain.habit import DailyRule, Habit


def _now() -> datetime:
    return datetime.now(timezone.utc)


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("habitmaster-summary")
    def habitmaster_summary() -> None:
        """Print today's rollup and the trailing 7-day trend."""

        from .extensions import get_repository
        from .services.analytics import today_rollup, weekly_trend

        config = current_app.config["HABITMASTER_CONFIG"]
        habits = get_repository().list_habits()
        now = _now()
        rollup = today_rollup(habits, now, config.REFERENCE_TZ, config.RATE_WINDOW_DAYS)

        click.echo(f"Habits: {rollup.total_habits}")
        click.echo(
            f"Due today: {rollup.due_today}  Completed: {rollup.completed_today}"
            f"  ({rollup.completion_percentage}%)"
        )
        click.echo(f"Needs action: {rollup.needs_action}")
        click.echo(
            f"Longest current streak: {rollup.longest_current_streak}"
            f"  Average streak: {rollup.average_streak}"
        )
        click.echo(f"Average {config.RATE_WINDOW_DAYS}-day completion: {rollup.average_completion_rate}%")
        click.echo("Last 7 days:")
        for day in weekly_trend(habits, now, tz=config.REFERENCE_TZ):
            click.echo(f"  {day.date:%a %Y-%m-%d}  {day.completed}/{day.total_due}  {day.rate}%")

    @app.cli.command("habitmaster-email-preview")
    def habitmaster_email_preview() -> None:
        """Show what today's reminder email would contain."""

        from .extensions import get_repository
        from .services.notifications import email_preview, reminder_settings
        from .services.recurrence import describe_rule

        config = current_app.config["HABITMASTER_CONFIG"]
        settings = reminder_settings(config)
        preview = email_preview(get_repository().list_habits(), _now(), config.REFERENCE_TZ)

        state = "enabled" if settings.enabled else "disabled"
        click.echo(f"Reminders {state} at {settings.time:%H:%M} ({settings.timezone})")
        if not preview.would_send_email:
            click.echo("Nothing due today; no email would be sent.")
            return
        click.echo(f"Pending ({preview.pending_today}):")
        for habit in preview.due_habits:
            click.echo(f"  - {habit.name} [{describe_rule(habit.rule)}]")
        click.echo(f"Completed ({preview.completed_today}):")
        for habit in preview.completed_habits:
            click.echo(f"  - {habit.name}")

    @app.cli.command("habitmaster-seed")
    @click.option("--limit", type=int, default=None, help="Only seed the first N suggestions")
    def habitmaster_seed(limit: int | None) -> None:
        """Insert the starter habit suggestions as daily habits."""

        from .extensions import get_repository

        repo = get_repository()
        existing = {h.name.casefold() for h in repo.list_habits().values()}
        suggestions = HABIT_SUGGESTIONS if limit is None else HABIT_SUGGESTIONS[: max(limit, 0)]
        now = _now()
        created = 0
        for suggestion in suggestions:
            if suggestion.name.casefold() in existing:
                continue
            repo.save(
                Habit(
                    id=uuid.uuid4().hex,
                    name=suggestion.name,
                    category=suggestion.category,
                    difficulty=suggestion.difficulty,
                    rule=DailyRule(),
                    created_at=now,
                    updated_at=now,
                )
            )
            created += 1
        click.echo(f"Seeded {created} habit(s).")

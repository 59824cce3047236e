"""Habit routes."""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, timezone

from flask import current_app, jsonify, request

from ...config import BaseConfig
from ...constants.habits import (
    DAYS_OF_WEEK,
    DIFFICULTY_LEVELS,
    HABIT_CATEGORIES,
    HABIT_FREQUENCIES,
    HABIT_SUGGESTIONS,
    STREAK_MILESTONES,
)
from ...domain.calendar import local_day, parse_day
from ...domain.habit import Habit, toggle_completion
from ...errors import HabitNotFoundError, MalformedDateError
from ...extensions import get_repository
from ...logging_config import get_logger
from ...services.analytics import habit_analytics, today_rollup, weekly_trend
from ...services.habits import habit_statistics, sort_habits
from ...services.notifications import email_preview, reminder_settings
from ...services.recurrence import describe_rule
from . import bp
from .forms import HabitForm, canonical_payload, validate_payload

logger = get_logger("blueprints.habits")

DEFAULT_ANALYTICS_DAYS = 30
MAX_ANALYTICS_DAYS = 365


def _config() -> BaseConfig:
    return current_app.config["HABITMASTER_CONFIG"]


def _now() -> datetime:
    """Current instant; patched in tests."""

    return datetime.now(timezone.utc)


def _payload() -> dict:
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def _habit_view(habit: Habit, now: datetime) -> dict:
    config = _config()
    stats = habit_statistics(habit, now, config.RATE_WINDOW_DAYS, config.REFERENCE_TZ)
    view = habit.to_record()
    view["schedule"] = describe_rule(habit.rule)
    view["statistics"] = stats.to_dict()
    return view


def _load_habit(habit_id: str) -> Habit:
    habit = get_repository().get(habit_id)
    if habit is None:
        raise HabitNotFoundError(habit_id)
    return habit


@bp.errorhandler(HabitNotFoundError)
def _not_found(exc: HabitNotFoundError):
    return jsonify({"error": str(exc)}), 404


@bp.errorhandler(MalformedDateError)
def _bad_date(exc: MalformedDateError):
    return jsonify({"error": str(exc)}), 400


@bp.get("/")
def list_habits():
    """List habits with their derived statistics."""

    now = _now()
    config = _config()
    habits = get_repository().list_habits()
    ordered = sort_habits(
        habits.values(),
        request.args.get("sort", "name"),
        now=now,
        tz=config.REFERENCE_TZ,
        window_days=config.RATE_WINDOW_DAYS,
    )
    return jsonify({"habits": [_habit_view(h, now) for h in ordered]})


@bp.post("/")
def create_habit():
    """Create a habit from the submitted form."""

    form, errors = validate_payload(_payload())
    if form is None:
        return jsonify({"errors": errors}), 400

    now = _now()
    habit = get_repository().save(form.to_habit(uuid.uuid4().hex, now))
    logger.info("Created habit", extra={"habit_id": habit.id, "frequency": habit.frequency})
    return jsonify(_habit_view(habit, now)), 201


@bp.get("/<habit_id>")
def get_habit(habit_id: str):
    return jsonify(_habit_view(_load_habit(habit_id), _now()))


@bp.put("/<habit_id>")
def update_habit(habit_id: str):
    """Edit a habit; omitted fields keep their current values."""

    habit = _load_habit(habit_id)
    values = HabitForm.values_from_habit(habit)
    values.update(canonical_payload(_payload()))
    form, errors = validate_payload(values)
    if form is None:
        return jsonify({"errors": errors}), 400

    now = _now()
    updated = replace(
        habit,
        name=form.name,
        description=form.description,
        category=form.category,
        difficulty=form.difficulty,
        rule=form.to_rule(),
        target=form.target,
        updated_at=now,
    )
    saved = get_repository().save(updated)
    return jsonify(_habit_view(saved, now))


@bp.delete("/<habit_id>")
def delete_habit(habit_id: str):
    _load_habit(habit_id)
    get_repository().delete(habit_id)
    return jsonify({"deleted": habit_id})


@bp.post("/<habit_id>/toggle")
def toggle_habit(habit_id: str):
    """Flip completion for ``date`` (default: today in the reference timezone)."""

    habit = _load_habit(habit_id)
    now = _now()
    raw_day = _payload().get("date")
    day = parse_day(raw_day, field="date") if raw_day else local_day(now, _config().REFERENCE_TZ)

    saved = get_repository().save(toggle_completion(habit, day, now))
    completed = day in saved.completion_dates
    logger.info(
        "Toggled habit completion",
        extra={"habit_id": habit_id, "day": day.isoformat(), "completed": completed},
    )
    view = _habit_view(saved, now)
    view["toggled"] = {"date": day.isoformat(), "completed": completed}
    return jsonify(view)


@bp.get("/summary")
def summary():
    """Today's dashboard totals."""

    config = _config()
    habits = get_repository().list_habits()
    rollup = today_rollup(habits, _now(), config.REFERENCE_TZ, config.RATE_WINDOW_DAYS)
    return jsonify(rollup.to_dict())


@bp.get("/week")
def week():
    habits = get_repository().list_habits()
    trend = weekly_trend(habits, _now(), tz=_config().REFERENCE_TZ)
    return jsonify({"days": [d.to_dict() for d in trend]})


@bp.get("/analytics")
def analytics():
    """Streak and consistency breakdown over ``days`` trailing days."""

    raw_days = request.args.get("days", str(DEFAULT_ANALYTICS_DAYS))
    try:
        days = int(raw_days)
    except ValueError:
        return jsonify({"errors": {"days": ["Must be a whole number of days."]}}), 400
    if not 1 <= days <= MAX_ANALYTICS_DAYS:
        return jsonify({"errors": {"days": [f"Must be between 1 and {MAX_ANALYTICS_DAYS}."]}}), 400

    habits = get_repository().list_habits()
    result = habit_analytics(habits, _now(), range_days=days, tz=_config().REFERENCE_TZ)
    return jsonify(result.to_dict())


@bp.get("/email-preview")
def email_preview_view():
    """What today's reminder email would contain."""

    config = _config()
    preview = email_preview(get_repository().list_habits(), _now(), config.REFERENCE_TZ)
    settings = reminder_settings(config)
    payload = preview.to_dict()
    payload["settings"] = {
        "enabled": settings.enabled,
        "time": settings.time.strftime("%H:%M"),
        "timezone": settings.timezone,
    }
    return jsonify(payload)


@bp.get("/catalog")
def catalog():
    """Option lists for building habit forms."""

    return jsonify(
        {
            "categories": [c._asdict() for c in HABIT_CATEGORIES],
            "difficulties": [d._asdict() for d in DIFFICULTY_LEVELS],
            "frequencies": [f._asdict() for f in HABIT_FREQUENCIES],
            "weekdays": [w._asdict() for w in DAYS_OF_WEEK],
            "milestones": [m._asdict() for m in STREAK_MILESTONES],
            "suggestions": [s._asdict() for s in HABIT_SUGGESTIONS],
        }
    )

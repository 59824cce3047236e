"""Tests for habit form validation."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from habitmaster.blueprints.habits.forms import HabitForm, canonical_payload, validate_payload
from habitmaster.domain.habit import Category, CustomRule, DailyRule, MonthlyRule, WeeklyRule


class TestHabitForm:
    def test_minimal_daily_habit(self):
        form, errors = validate_payload({"name": "Floss"})
        assert errors == {}
        assert form.to_rule() == DailyRule()

    def test_empty_name_rejected(self):
        form, errors = validate_payload({"name": "   "})
        assert form is None
        assert "name" in errors

    def test_weekly_requires_days(self):
        form, errors = validate_payload({"name": "Gym", "frequency": "weekly"})
        assert form is None
        assert any("weekday" in msg for msg in errors["__root__"])

    def test_weekly_days_from_comma_string(self):
        form, _ = validate_payload({"name": "Gym", "frequency": "weekly", "weekly_days": "5, 1,3"})
        assert form.weekly_days == [1, 3, 5]
        assert form.to_rule() == WeeklyRule(frozenset({1, 3, 5}))

    def test_weekday_out_of_range_rejected(self):
        _, errors = validate_payload({"name": "Gym", "frequency": "weekly", "weekly_days": [7]})
        assert "weekly_days" in errors

    def test_monthly_requires_days(self):
        form, errors = validate_payload({"name": "Rent", "frequency": "monthly", "monthly_days": []})
        assert form is None
        assert "__root__" in errors

    def test_monthly_rule(self):
        form, _ = validate_payload({"name": "Rent", "frequency": "monthly", "monthly_days": [1, 15]})
        assert form.to_rule() == MonthlyRule(frozenset({1, 15}))

    @pytest.mark.parametrize("interval", [0, 366])
    def test_custom_interval_out_of_range(self, interval):
        _, errors = validate_payload({"name": "Water", "frequency": "custom", "custom_interval": interval})
        assert "custom_interval" in errors

    def test_custom_requires_interval(self):
        form, errors = validate_payload({"name": "Water", "frequency": "custom"})
        assert form is None
        assert "__root__" in errors

    def test_unknown_frequency_rejected(self):
        _, errors = validate_payload({"name": "Water", "frequency": "hourly"})
        assert "frequency" in errors

    def test_to_habit_starts_without_completions(self):
        form, _ = validate_payload({"name": "Water", "frequency": "custom", "custom_interval": "3"})
        now = datetime(2024, 1, 5, tzinfo=timezone.utc)
        habit = form.to_habit("abc", now)

        assert habit.rule == CustomRule(3)
        assert habit.completions == ()
        assert habit.created_at == now

    def test_values_from_habit_round_trip(self, habit_factory):
        habit = habit_factory(name="Read", rule=WeeklyRule(frozenset({2, 4})))
        form = HabitForm.model_validate(HabitForm.values_from_habit(habit))
        assert form.to_rule() == habit.rule

    def test_record_keys_accepted(self):
        form, errors = validate_payload(
            {"name": "Gym", "frequency": "weekly", "weeklyDays": [4, 2], "monthlyDays": [9]}
        )
        assert errors == {}
        assert form.weekly_days == [2, 4]
        assert form.monthly_days == [9]

        form, _ = validate_payload({"name": "Water", "frequency": "custom", "customInterval": 2})
        assert form.to_rule() == CustomRule(2)

    def test_record_key_errors_use_field_name(self):
        _, errors = validate_payload({"name": "Water", "frequency": "custom", "customInterval": 0})
        assert "custom_interval" in errors

    def test_canonical_payload_renames_record_keys(self):
        assert canonical_payload({"weeklyDays": [1], "name": "Gym"}) == {"weekly_days": [1], "name": "Gym"}
        assert canonical_payload({"weeklyDays": [1], "weekly_days": [2]}) == {"weekly_days": [2]}

    def test_unknown_category_rejected(self):
        form, errors = validate_payload({"name": "Stargazing", "category": "astrology"})
        assert form is None
        assert "category" in errors

    def test_category_becomes_enum(self):
        form, _ = validate_payload({"name": "Call mum", "category": "social"})
        assert form.category is Category.SOCIAL
        assert form.to_habit("abc", datetime(2024, 1, 5, tzinfo=timezone.utc)).category is Category.SOCIAL

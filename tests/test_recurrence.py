"""Tests for recurrence rule evaluation.

Covers the calendar rules (daily, weekly, monthly), both custom-interval
policies and the fail-open/fail-closed defaults for degenerate rules.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from habitmaster.domain.calendar import iter_days
from habitmaster.domain.habit import (
    CustomRule,
    DailyRule,
    MonthlyRule,
    UnrecognizedRule,
    WeeklyRule,
    build_rule,
)
from habitmaster.services.recurrence import (
    DuePolicy,
    describe_rule,
    is_due_by_completion_gap,
    is_due_on,
    is_due_point_in_time,
)

CREATED = date(2024, 1, 1)  # a Monday


class TestCalendarRules:
    """Daily, weekly and monthly rules ignore creation and completions."""

    def test_daily_is_due_every_day(self):
        for day in iter_days(date(2023, 1, 1), date(2024, 12, 31)):
            assert is_due_on(DailyRule(), day, CREATED)

    def test_daily_is_due_before_creation(self):
        assert is_due_on(DailyRule(), date(2020, 5, 5), CREATED)

    def test_weekly_tuesday_not_due_for_mon_wed_fri(self):
        rule = WeeklyRule(frozenset({1, 3, 5}))
        tuesday = date(2024, 1, 2)
        assert tuesday.strftime("%A") == "Tuesday"
        assert is_due_on(rule, tuesday, CREATED) is False

    def test_weekly_due_on_listed_days(self):
        rule = WeeklyRule(frozenset({1, 3, 5}))
        assert is_due_on(rule, date(2024, 1, 1), CREATED)  # Monday
        assert is_due_on(rule, date(2024, 1, 3), CREATED)  # Wednesday
        assert is_due_on(rule, date(2024, 1, 5), CREATED)  # Friday

    def test_weekly_zero_is_sunday(self):
        rule = WeeklyRule(frozenset({0}))
        assert is_due_on(rule, date(2024, 1, 7), CREATED)
        assert not is_due_on(rule, date(2024, 1, 6), CREATED)

    def test_empty_weekly_rule_is_never_due(self):
        rule = WeeklyRule(frozenset())
        for day in iter_days(date(2024, 1, 1), date(2024, 1, 14)):
            assert not is_due_on(rule, day, CREATED)
            assert not is_due_on(rule, day, CREATED, policy=DuePolicy.COMPLETION_GATED)

    def test_monthly_due_on_listed_days(self):
        rule = MonthlyRule(frozenset({1, 15}))
        assert is_due_on(rule, date(2024, 3, 1), CREATED)
        assert is_due_on(rule, date(2024, 3, 15), CREATED)
        assert not is_due_on(rule, date(2024, 3, 16), CREATED)

    def test_monthly_31_does_not_roll_over(self):
        rule = MonthlyRule(frozenset({31}))
        due_days = [d for d in iter_days(date(2024, 2, 1), date(2024, 3, 1)) if is_due_on(rule, d, CREATED)]
        assert due_days == []

    def test_empty_monthly_rule_is_never_due(self):
        rule = MonthlyRule(frozenset())
        assert not is_due_on(rule, date(2024, 1, 1), CREATED)

    def test_unrecognized_rule_fails_open(self):
        rule = UnrecognizedRule("fortnightly")
        assert is_due_on(rule, date(2024, 1, 2), CREATED)
        assert is_due_on(rule, date(2024, 1, 2), CREATED, policy=DuePolicy.COMPLETION_GATED)


class TestPointInTimeCustomRule:
    """Custom interval anchored to the creation day."""

    def test_due_on_interval_multiples(self):
        rule = CustomRule(7)
        assert is_due_point_in_time(rule, date(2024, 1, 8), CREATED)
        assert not is_due_point_in_time(rule, date(2024, 1, 9), CREATED)

    def test_due_on_creation_day(self):
        assert is_due_point_in_time(CustomRule(3), CREATED, CREATED)

    def test_not_due_before_creation(self):
        rule = CustomRule(7)
        assert not is_due_point_in_time(rule, CREATED - timedelta(days=7), CREATED)

    def test_completions_do_not_matter(self):
        rule = CustomRule(2)
        assert is_due_on(rule, date(2024, 1, 3), CREATED, completion_dates={date(2024, 1, 2)})


class TestCompletionGatedCustomRule:
    """Custom interval anchored to the most recent completion."""

    def test_never_completed_is_due(self):
        assert is_due_by_completion_gap(CustomRule(5), date(2024, 1, 2))

    def test_not_due_inside_gap(self):
        rule = CustomRule(3)
        done = {date(2024, 1, 10)}
        assert not is_due_by_completion_gap(rule, date(2024, 1, 12), done)

    def test_due_once_gap_reached(self):
        rule = CustomRule(3)
        done = {date(2024, 1, 10)}
        assert is_due_by_completion_gap(rule, date(2024, 1, 13), done)
        assert is_due_by_completion_gap(rule, date(2024, 1, 20), done)

    def test_uses_latest_completion(self):
        rule = CustomRule(3)
        done = {date(2024, 1, 1), date(2024, 1, 10)}
        assert not is_due_by_completion_gap(rule, date(2024, 1, 11), done)

    def test_ignores_completions_after_reference(self):
        rule = CustomRule(3)
        done = {date(2024, 1, 1), date(2024, 1, 10)}
        assert is_due_by_completion_gap(rule, date(2024, 1, 5), done)

    def test_only_future_completions_means_due(self):
        assert is_due_by_completion_gap(CustomRule(3), date(2024, 1, 5), {date(2024, 2, 1)})

    def test_policy_dispatch(self):
        rule = CustomRule(7)
        done = {date(2024, 1, 6)}
        day = date(2024, 1, 8)
        assert is_due_on(rule, day, CREATED, done, policy=DuePolicy.POINT_IN_TIME)
        assert not is_due_on(rule, day, CREATED, done, policy=DuePolicy.COMPLETION_GATED)


class TestRuleConstruction:
    def test_custom_interval_clamped_to_one(self):
        assert CustomRule(0).interval == 1
        assert CustomRule(-4).interval == 1

    def test_out_of_range_days_dropped(self):
        assert WeeklyRule(frozenset({-1, 3, 7})).days == frozenset({3})
        assert MonthlyRule(frozenset({0, 15, 32})).days == frozenset({15})

    @pytest.mark.parametrize(
        "frequency, expected",
        [
            ("daily", DailyRule),
            ("weekly", WeeklyRule),
            ("monthly", MonthlyRule),
            ("custom", CustomRule),
            ("yearly", UnrecognizedRule),
            (None, UnrecognizedRule),
        ],
    )
    def test_build_rule_dispatch(self, frequency, expected):
        assert isinstance(build_rule(frequency), expected)

    def test_build_rule_unknown_logs_warning(self, caplog):
        with caplog.at_level("WARNING", logger="habitmaster"):
            build_rule("yearly")
        assert any("Unrecognized habit frequency" in r.message for r in caplog.records)


class TestDescribeRule:
    def test_labels(self):
        assert describe_rule(DailyRule()) == "Daily"
        assert describe_rule(WeeklyRule(frozenset({5, 1, 3}))) == "Mon, Wed, Fri"
        assert describe_rule(MonthlyRule(frozenset({15, 1}))) == "1, 15th of month"
        assert describe_rule(CustomRule(3)) == "Every 3 days"
        assert describe_rule(UnrecognizedRule("x")) == "Daily"

"""Tests for the Flask CLI commands."""

from __future__ import annotations


def test_seed_inserts_suggestions_once(app):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["habitmaster-seed"])
    assert first.exit_code == 0
    assert "Seeded 10 habit(s)." in first.output

    again = runner.invoke(args=["habitmaster-seed"])
    assert "Seeded 0 habit(s)." in again.output


def test_seed_limit(app):
    result = app.test_cli_runner().invoke(args=["habitmaster-seed", "--limit", "3"])
    assert "Seeded 3 habit(s)." in result.output


def test_summary_reports_rollup(app):
    runner = app.test_cli_runner()
    runner.invoke(args=["habitmaster-seed", "--limit", "2"])

    result = runner.invoke(args=["habitmaster-summary"])
    assert result.exit_code == 0
    assert "Habits: 2" in result.output
    assert "Due today: 2" in result.output
    assert "Last 7 days:" in result.output


def test_email_preview_lists_pending(app):
    runner = app.test_cli_runner()
    runner.invoke(args=["habitmaster-seed", "--limit", "1"])

    result = runner.invoke(args=["habitmaster-email-preview"])
    assert result.exit_code == 0
    assert "Reminders enabled at 15:00 (UTC)" in result.output
    assert "Pending (1):" in result.output
    assert "Drink 8 glasses of water [Daily]" in result.output


def test_email_preview_with_no_habits(app):
    result = app.test_cli_runner().invoke(args=["habitmaster-email-preview"])
    assert "no email would be sent" in result.output

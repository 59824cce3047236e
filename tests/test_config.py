"""Tests for environment-driven configuration."""

from __future__ import annotations

from zoneinfo import ZoneInfo

import pytest
from sqlalchemy.pool import StaticPool

from habitmaster import _resolve_config
from habitmaster.config import BaseConfig, DevConfig, TestConfig


@pytest.fixture(autouse=True)
def _data_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("HABITMASTER_DATA_DIR", str(tmp_path))
    for name in (
        "HABITMASTER_DATABASE_URL",
        "HABITMASTER_TIMEZONE",
        "HABITMASTER_RATE_WINDOW_DAYS",
        "HABITMASTER_DEV_MODE",
        "HABITMASTER_SECRET_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path):
    config = BaseConfig()
    assert config.DATA_DIR == tmp_path.resolve()
    assert config.DATABASE_URL.endswith("habitmaster.db")
    assert config.REFERENCE_TZ == ZoneInfo("UTC")
    assert config.RATE_WINDOW_DAYS == 30


def test_timezone_from_env(monkeypatch):
    monkeypatch.setenv("HABITMASTER_TIMEZONE", "America/Chicago")
    assert BaseConfig().REFERENCE_TZ == ZoneInfo("America/Chicago")


def test_unknown_timezone_rejected(monkeypatch):
    monkeypatch.setenv("HABITMASTER_TIMEZONE", "Mars/Olympus_Mons")
    with pytest.raises(ValueError):
        BaseConfig()


@pytest.mark.parametrize("value", ["0", "ten"])
def test_bad_rate_window_rejected(monkeypatch, value):
    monkeypatch.setenv("HABITMASTER_RATE_WINDOW_DAYS", value)
    with pytest.raises(ValueError):
        BaseConfig()


def test_secret_required_outside_dev_mode(monkeypatch):
    monkeypatch.setenv("HABITMASTER_DEV_MODE", "false")
    with pytest.raises(ValueError):
        BaseConfig()

    monkeypatch.setenv("HABITMASTER_SECRET_KEY", "s3cret")
    assert BaseConfig().SECRET_KEY == "s3cret"


def test_bad_email_time_rejected(monkeypatch):
    monkeypatch.setenv("HABITMASTER_EMAIL_TIME", "3pm")
    with pytest.raises(ValueError):
        BaseConfig()


def test_test_config_uses_static_in_memory_pool():
    config = TestConfig()
    assert config.DATABASE_URL == "sqlite://"
    assert config.sqlalchemy_engine_options()["poolclass"] is StaticPool


def test_resolve_config_names():
    assert _resolve_config("development") is DevConfig
    assert _resolve_config("TESTING") is TestConfig
    assert _resolve_config("staging") is BaseConfig
    assert _resolve_config(None) is BaseConfig

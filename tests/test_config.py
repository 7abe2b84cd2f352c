"""Tests for application settings."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from payminder.config import Settings


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep stray PAYMINDER_* variables and .env files out of the tests."""
    monkeypatch.chdir(tmp_path)
    for name in ("PAYMINDER_DB_PATH", "PAYMINDER_LOG_LEVEL", "PAYMINDER_DUE_SOON_DAYS"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings()
    assert settings.db_path is None
    assert settings.log_level == "WARNING"
    assert settings.reminder_interval == timedelta(minutes=5)
    assert settings.due_soon_days == 3
    assert settings.feed_max_age == timedelta(hours=24)
    assert settings.feed_max_entries == 100
    assert settings.auto_dismiss == timedelta(seconds=10)


def test_database_path_defaults_to_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert Settings().database_path == tmp_path / ".payminder" / "payminder.db"


def test_database_path_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("PAYMINDER_DB_PATH", str(tmp_path / "custom.db"))
    settings = Settings()
    assert settings.db_path == str(tmp_path / "custom.db")
    assert settings.database_path == tmp_path / "custom.db"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PAYMINDER_DUE_SOON_DAYS", "7")
    monkeypatch.setenv("PAYMINDER_LOG_LEVEL", "debug")
    settings = Settings()
    assert settings.due_soon_days == 7
    assert settings.log_level == "DEBUG"


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("PAYMINDER_DB_PATH=/tmp/from-dotenv.db\n")
    assert Settings().db_path == "/tmp/from-dotenv.db"


@pytest.mark.parametrize(
    "overrides",
    [
        {"log_level": "LOUD"},
        {"reminder_interval_minutes": 0},
        {"due_soon_days": -1},
        {"feed_max_entries": 0},
    ],
)
def test_invalid_values(overrides):
    with pytest.raises(ValidationError):
        Settings(**overrides)

from pathlib import Path

import pytest

from expense_core.config import DATABASE_ENV, LOG_LEVEL_ENV, load_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv(DATABASE_ENV, raising=False)
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)

    settings = load_settings()

    assert settings.database_path == Path("data") / "expenses.db"
    assert settings.log_level == "INFO"
    assert settings.database_url == f"sqlite:///{Path('data') / 'expenses.db'}"


def test_environment_then_arguments(monkeypatch, tmp_path):
    monkeypatch.setenv(DATABASE_ENV, str(tmp_path / "env.db"))
    monkeypatch.setenv(LOG_LEVEL_ENV, "debug")

    from_env = load_settings()
    assert from_env.database_path == tmp_path / "env.db"
    assert from_env.log_level == "DEBUG"

    explicit = load_settings(tmp_path / "cli.db", "warning")
    assert explicit.database_path == tmp_path / "cli.db"
    assert explicit.log_level == "WARNING"


def test_unknown_log_level(monkeypatch):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    with pytest.raises(ValueError):
        load_settings(log_level="chatty")


def test_ensure_database_dir(tmp_path):
    settings = load_settings(tmp_path / "nested" / "expenses.db", "INFO")
    settings.ensure_database_dir()

    assert (tmp_path / "nested").is_dir()

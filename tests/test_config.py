import logging
from pathlib import Path

import pytest

from config_guardian.config import DEBOUNCE_INTERVAL, Settings
from config_guardian.errors import ConfigurationError


def test_defaults():
    settings = Settings.from_env(load_env_file=False)

    assert settings.baseline_file == Path("snapshot.json")
    assert settings.log_file == Path("drift.log")
    assert settings.log_level == logging.INFO
    assert settings.debounce_seconds == DEBOUNCE_INTERVAL == 2.0


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BASELINE_FILE", "/var/lib/guardian/base.json")
    monkeypatch.setenv("DRIFT_LOG_FILE", "/var/log/guardian.log")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("DEBOUNCE_SECONDS", "0.5")

    settings = Settings.from_env(load_env_file=False)

    assert settings.baseline_file == Path("/var/lib/guardian/base.json")
    assert settings.log_file == Path("/var/log/guardian.log")
    assert settings.log_level == logging.DEBUG
    assert settings.debounce_seconds == 0.5


def test_dotenv_file_is_loaded(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("DEBOUNCE_SECONDS=7\n")
    # let monkeypatch remove whatever load_dotenv puts in os.environ
    monkeypatch.setenv("DEBOUNCE_SECONDS", "")
    monkeypatch.delenv("DEBOUNCE_SECONDS")

    settings = Settings.from_env(env_file=env_file)

    assert settings.debounce_seconds == 7.0


def test_environment_wins_over_dotenv_file(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("DEBOUNCE_SECONDS=7\n")
    monkeypatch.setenv("DEBOUNCE_SECONDS", "3")

    settings = Settings.from_env(env_file=env_file)

    assert settings.debounce_seconds == 3.0


@pytest.mark.parametrize(
    "name, value",
    [
        ("DEBOUNCE_SECONDS", "soon"),
        ("DEBOUNCE_SECONDS", "-1"),
        ("DEBOUNCE_SECONDS", "nan"),
        ("LOG_LEVEL", "LOUD"),
    ],
)
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        Settings.from_env(load_env_file=False)

import logging
import math
import os
import pathlib
from dataclasses import dataclass

from dotenv import load_dotenv

from config_guardian.errors import ConfigurationError

DEFAULT_BASELINE_FILE = "snapshot.json"
DEFAULT_LOG_FILE = "drift.log"
DEFAULT_LOG_LEVEL = "INFO"
DEBOUNCE_INTERVAL = 2.0         # seconds between two monitor-triggered comparisons


@dataclass(frozen=True)
class Settings:
    baseline_file: pathlib.Path = pathlib.Path(DEFAULT_BASELINE_FILE)
    log_file: pathlib.Path = pathlib.Path(DEFAULT_LOG_FILE)
    log_level: int = logging.INFO
    debounce_seconds: float = DEBOUNCE_INTERVAL

    @classmethod
    def from_env(cls, env_file=None, load_env_file: bool = True) -> "Settings":
        """Build settings from the environment, after loading `.env` if present."""
        if load_env_file:
            load_dotenv(env_file)

        return cls(
            baseline_file=pathlib.Path(os.getenv('BASELINE_FILE', DEFAULT_BASELINE_FILE)),
            log_file=pathlib.Path(os.getenv('DRIFT_LOG_FILE', DEFAULT_LOG_FILE)),
            log_level=_parse_level(os.getenv('LOG_LEVEL', DEFAULT_LOG_LEVEL)),
            debounce_seconds=_parse_debounce(os.getenv('DEBOUNCE_SECONDS', str(DEBOUNCE_INTERVAL))),
        )


def _parse_level(value: str) -> int:
    level = logging.getLevelName(value.strip().upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"LOG_LEVEL must be a logging level name, got {value!r}")
    return level


def _parse_debounce(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError:
        raise ConfigurationError(f"DEBOUNCE_SECONDS must be a number, got {value!r}") from None
    if not math.isfinite(seconds) or seconds < 0:
        raise ConfigurationError(f"DEBOUNCE_SECONDS must be a finite, non-negative number, got {value!r}")
    return seconds

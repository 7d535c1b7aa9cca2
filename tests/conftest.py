from pathlib import Path

import pytest

from config_guardian.baseline import BaselineStore
from config_guardian.monitor import EventSource, WatchEvent


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    d = tmp_path / "etc"
    d.mkdir()
    (d / "a.txt").write_text("hello")
    (d / "b.txt").write_text("world")
    return d


@pytest.fixture
def store(tmp_path: Path) -> BaselineStore:
    return BaselineStore(tmp_path / "state" / "snapshot.json")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("BASELINE_FILE", "DRIFT_LOG_FILE", "LOG_LEVEL", "DEBOUNCE_SECONDS"):
        monkeypatch.delenv(name, raising=False)


class ScriptedEventSource(EventSource):
    """
    Plays a fixed script onto the channel when started.

    Script items are WatchEvent values, exceptions (sent as watch errors),
    or the string "close" which closes the channel for good.
    """

    def __init__(self, script, fail_with=None):
        self.script = list(script)
        self.fail_with = fail_with
        self.started_with = None
        self.stopped = False

    def start(self, directory, channel):
        if self.fail_with is not None:
            raise self.fail_with
        self.started_with = directory
        for item in self.script:
            if item == "close":
                channel.close()
            elif isinstance(item, BaseException):
                channel.fail(item)
            else:
                channel.send(item)

    def stop(self):
        self.stopped = True


class FakeClock:
    """Monotonic clock that advances by `step` seconds on every reading."""

    def __init__(self, step, start=0.0):
        self.step = step
        self.now = start

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


def modified(path) -> WatchEvent:
    return WatchEvent("modified", str(path))

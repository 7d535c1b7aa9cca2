import enum
import logging
import os
import queue
import threading
import time
from typing import Callable, Iterable, NamedTuple, Optional

from watchdog.events import (
    EVENT_TYPE_CLOSED,
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from config_guardian.config import DEBOUNCE_INTERVAL
from config_guardian.errors import GuardianError, WatchChannelClosed, WatchSubscriptionFailure
from config_guardian.models import DriftReport

logger = logging.getLogger("drift_monitor")

# Open/close-without-write notifications are produced by our own reads.
CHANGE_EVENT_TYPES = {
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    EVENT_TYPE_CLOSED,
}


class WatchEvent(NamedTuple):
    event_type: str
    path: str

    def __str__(self):
        return f"{self.event_type} {self.path}"


class WatchError(NamedTuple):
    error: BaseException


_CLOSED = object()
_WAKE = object()


class EventChannel:
    """
    Blocking hand-off between a notification source and the monitor loop.

    Carries WatchEvent and WatchError values, a terminal close marker, and
    wake-ups used to make the loop notice cancellation.
    """

    def __init__(self):
        self._queue = queue.Queue()

    def send(self, event: WatchEvent) -> None:
        self._queue.put(event)

    def fail(self, error: BaseException) -> None:
        self._queue.put(WatchError(error))

    def close(self) -> None:
        self._queue.put(_CLOSED)

    def wake(self) -> None:
        self._queue.put(_WAKE)

    def receive(self):
        return self._queue.get()


class EventSource:
    """Something that publishes change notifications for a directory onto a channel."""

    def start(self, directory: str, channel: EventChannel) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        pass


class _ChannelHandler(FileSystemEventHandler):
    def __init__(self, channel: EventChannel, root: str):
        self.channel = channel
        self.root = os.path.abspath(root)

    def on_any_event(self, event):
        if event.is_directory:
            # Losing the watched directory itself ends the stream.
            if event.event_type in (EVENT_TYPE_DELETED, EVENT_TYPE_MOVED) and self._is_root(event.src_path):
                self.channel.close()
            return
        if event.event_type not in CHANGE_EVENT_TYPES:
            return
        self.channel.send(WatchEvent(event.event_type, os.fsdecode(event.src_path)))

    def _is_root(self, path) -> bool:
        return os.path.abspath(os.fsdecode(path)) == self.root


class WatchdogEventSource(EventSource):
    """Non-recursive watchdog observer feeding an EventChannel."""

    def __init__(self, observer_factory=Observer):
        self.observer_factory = observer_factory
        self.observer = None

    def start(self, directory, channel):
        observer = self.observer_factory()
        try:
            observer.schedule(_ChannelHandler(channel, str(directory)), str(directory), recursive=False)
            observer.start()
        except OSError as e:
            raise WatchSubscriptionFailure(str(directory), e) from e
        self.observer = observer

    def stop(self):
        if self.observer and self.observer.is_alive():
            self.observer.stop()
            self.observer.join()
        self.observer = None


class MonitorState(enum.Enum):
    IDLE = "idle"
    SUPPRESSED = "debounced-suppress"
    COMPARING = "comparing"
    STOPPED = "stopped"


class MonitorLoop:
    """
    Re-run a drift check whenever the watched directory changes.

    Debouncing is drop-and-wait: an event arriving less than `interval`
    seconds after the previous comparison finished is discarded, not
    deferred. The first event after startup always triggers a comparison.
    Comparisons run one at a time on the thread that called `run`.
    """

    def __init__(
        self,
        check: Callable[[str], DriftReport],
        source: Optional[EventSource] = None,
        interval: float = DEBOUNCE_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        exclude: Iterable[str] = (),
        on_change: Optional[Callable[[WatchEvent], None]] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.check = check
        self.source = source or WatchdogEventSource()
        self.interval = interval
        self.clock = clock
        self.exclude = set(exclude)
        self.on_change = on_change
        self.log = log or logger

        self.channel = EventChannel()
        self.state = MonitorState.IDLE
        self.comparisons = 0
        self.suppressed = 0
        self._last_check: Optional[float] = None
        self._stop_event = threading.Event()

    def stop(self) -> None:
        """Ask a running loop to return; safe to call from any thread."""
        self._stop_event.set()
        self.channel.wake()

    def run(self, directory, on_drift: Callable[[DriftReport], None]) -> None:
        directory = str(directory)
        self.source.start(directory, self.channel)
        self.state = MonitorState.IDLE
        self.log.info("Monitoring %s for changes", directory)

        try:
            while True:
                item = self.channel.receive()
                self.state = MonitorState.IDLE
                if self._stop_event.is_set():
                    break
                if item is _WAKE:
                    continue
                if item is _CLOSED:
                    self.log.error("Notification channel for %s closed", directory)
                    raise WatchChannelClosed()
                if isinstance(item, WatchError):
                    self.log.warning("Watch error: %s", item.error)
                    continue
                if os.path.basename(item.path) in self.exclude:
                    continue
                self._handle(directory, item, on_drift)
        finally:
            self.source.stop()
            self.state = MonitorState.STOPPED
            self.log.info("Stopped monitoring %s", directory)

    def _handle(self, directory: str, event: WatchEvent, on_drift) -> None:
        now = self.clock()
        if self._last_check is not None and now - self._last_check < self.interval:
            self.state = MonitorState.SUPPRESSED
            self.suppressed += 1
            self.log.debug("Debounced event: %s", event)
            return

        self.state = MonitorState.COMPARING
        self.log.info("Change detected: %s", event)
        if self.on_change:
            self.on_change(event)
        try:
            report = self.check(directory)
        except GuardianError as e:
            self.log.error("Drift check of %s failed: %s", directory, e)
        else:
            on_drift(report)
        finally:
            self.comparisons += 1
            self._last_check = self.clock()
            self.state = MonitorState.IDLE

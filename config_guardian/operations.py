"""
Snapshot, compare and monitor: the three operations exposed to operators.

Each one validates the target directory first and lets GuardianError
propagate to the caller. Files that belong to the tool itself (the
baseline record, the drift log) are left out of fingerprinting and
monitoring when they live inside the watched directory.
"""
import logging
import pathlib
from typing import Callable, Iterable, Optional, Set

from config_guardian.alert import drift_alert
from config_guardian.baseline import BaselineStore
from config_guardian.config import DEBOUNCE_INTERVAL
from config_guardian.drift import compare as compare_fingerprints
from config_guardian.errors import InvalidDirectory
from config_guardian.fingerprint import compute_fingerprints
from config_guardian.models import DriftReport, FingerprintCollection
from config_guardian.monitor import EventSource, MonitorLoop, WatchEvent

logger = logging.getLogger("operations")


def validate_directory(directory) -> pathlib.Path:
    path = pathlib.Path(directory)
    if not path.is_dir():
        raise InvalidDirectory(str(directory))
    return path


def own_files(directory: pathlib.Path, store: BaselineStore, ignore_files: Iterable = ()) -> Set[str]:
    """Names of the tool's own files that sit directly inside `directory`."""
    root = directory.resolve()
    names = set()
    for f in [store.path, *ignore_files]:
        f = pathlib.Path(f)
        if f.resolve().parent == root:
            names.add(f.name)
    return names


def snapshot(
    directory,
    store: BaselineStore,
    ignore_files: Iterable = (),
    log: Optional[logging.Logger] = None,
) -> FingerprintCollection:
    oplog = log or logger
    root = validate_directory(directory)
    oplog.info("Taking snapshot of directory: %s", root)

    collection = compute_fingerprints(root, exclude=own_files(root, store, ignore_files), log=log)
    store.save(collection)
    oplog.info("Snapshot of %s saved to %s (%d files)", root, store.path, len(collection))
    return collection


def check_drift(
    directory,
    store: BaselineStore,
    ignore_files: Iterable = (),
    log: Optional[logging.Logger] = None,
) -> DriftReport:
    """One compare cycle: load the baseline, fingerprint the directory, diff."""
    oplog = log or logger
    root = pathlib.Path(directory)

    baseline = store.load()
    current = compute_fingerprints(root, exclude=own_files(root, store, ignore_files), log=log)
    report = DriftReport(
        directory=str(root),
        records=compare_fingerprints(baseline, current),
        warnings=list(current.warnings),
    )

    if report.has_drift:
        oplog.warning("Configuration drift detected in %s: %s", root, report.lines())
    else:
        oplog.info("No configuration drift detected in %s.", root)
    return report


def compare(
    directory,
    store: BaselineStore,
    alert: bool = False,
    ignore_files: Iterable = (),
    alerter: Callable[[DriftReport], object] = drift_alert,
    log: Optional[logging.Logger] = None,
) -> DriftReport:
    oplog = log or logger
    root = validate_directory(directory)
    oplog.info("Comparing directory: %s (alert: %s)", root, alert)

    report = check_drift(root, store, ignore_files, log=log)
    if alert and report.has_drift:
        alerter(report)
    return report


def monitor(
    directory,
    store: BaselineStore,
    on_drift: Callable[[DriftReport], None],
    alert: bool = False,
    source: Optional[EventSource] = None,
    interval: float = DEBOUNCE_INTERVAL,
    ignore_files: Iterable = (),
    on_change: Optional[Callable[[WatchEvent], None]] = None,
    alerter: Callable[[DriftReport], object] = drift_alert,
    log: Optional[logging.Logger] = None,
    loop_factory=MonitorLoop,
) -> None:
    """
    Block, re-checking `directory` after each qualifying burst of changes.

    Fails fast on an invalid directory or a missing/corrupt baseline.
    Returns only once the loop is stopped; raises WatchChannelClosed if
    the notification source goes away.
    """
    oplog = log or logger
    root = validate_directory(directory)
    store.load()
    oplog.info("Monitoring directory: %s (alert: %s)", root, alert)

    ignored = own_files(root, store, ignore_files)

    def handle(report: DriftReport) -> None:
        on_drift(report)
        if alert and report.has_drift:
            alerter(report)

    loop = loop_factory(
        check=lambda d: check_drift(d, store, ignore_files, log=log),
        source=source,
        interval=interval,
        exclude=ignored,
        on_change=on_change,
        log=log,
    )
    loop.run(root, handle)

import argparse
import logging
import sys

from config_guardian import operations
from config_guardian.baseline import BaselineStore
from config_guardian.config import Settings
from config_guardian.errors import ConfigurationError, GuardianError

logger = logging.getLogger("config_guardian")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="config-guardian",
        description="Detect configuration drift in files.",
    )
    parser.add_argument("--baseline", metavar="PATH", help="baseline record (default: $BASELINE_FILE or snapshot.json)")
    parser.add_argument("--log-file", metavar="PATH", help="log file (default: $DRIFT_LOG_FILE or drift.log)")
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    p = sub.add_parser("snapshot", help="Take a snapshot of configuration files.")
    p.add_argument("directory", nargs="?", default=".", metavar="DIRECTORY")

    p = sub.add_parser("compare", help="Compare current files with the last snapshot.")
    p.add_argument("directory", nargs="?", default=".", metavar="DIRECTORY")
    p.add_argument("--alert", action="store_true", help="raise an alert when drift is found")

    p = sub.add_parser("monitor", help="Monitor directory for changes and detect drift.")
    p.add_argument("directory", nargs="?", default=".", metavar="DIRECTORY")
    p.add_argument("--alert", action="store_true", help="raise an alert when drift is found")

    return parser


def configure_logging(log_file, level=logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.FileHandler(log_file, delay=True)],
    )


def print_report(report) -> None:
    for warning in report.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    if not report.has_drift:
        print("No drift detected.")
        return
    print("Drift detected:")
    for line in report.lines():
        print(f"  {line}")


def run_snapshot(args, store, settings, log_file) -> int:
    collection = operations.snapshot(args.directory, store, ignore_files=[log_file])
    for warning in collection.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    if not len(collection):
        print(f"Warning: Directory {args.directory} is empty.", file=sys.stderr)
    print(f"Snapshot taken and saved to {store.path} ({len(collection)} files)")
    return 0


def run_compare(args, store, settings, log_file) -> int:
    report = operations.compare(args.directory, store, alert=args.alert, ignore_files=[log_file])
    print_report(report)
    return 0


def run_monitor(args, store, settings, log_file) -> int:
    print(f"Monitoring {args.directory} for changes... (Press Ctrl+C to stop)")
    try:
        operations.monitor(
            args.directory,
            store,
            on_drift=print_report,
            alert=args.alert,
            interval=settings.debounce_seconds,
            ignore_files=[log_file],
            on_change=lambda event: print(f"Change detected: {event}"),
        )
    except KeyboardInterrupt:
        logger.info("Monitoring interrupted by operator.")
        print("Monitoring stopped.")
    return 0


COMMANDS = {
    "snapshot": run_snapshot,
    "compare": run_compare,
    "monitor": run_monitor,
}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    log_file = args.log_file or settings.log_file
    configure_logging(log_file, settings.log_level)
    logger.info("Configuration Drift Detector started.")

    if args.command is None:
        print("No command provided. Use --help for options.")
        return 0

    store = BaselineStore(args.baseline or settings.baseline_file)
    try:
        return COMMANDS[args.command](args, store, settings, log_file)
    except GuardianError as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

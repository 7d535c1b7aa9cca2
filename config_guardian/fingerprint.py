import logging
import os
import pathlib
from typing import Iterable, Optional

import blake3

from config_guardian.errors import InvalidDirectory
from config_guardian.models import FileFingerprint, FingerprintCollection

logger = logging.getLogger("fingerprinter")


def hash_bytes(data: bytes) -> str:
    return blake3.blake3(data).hexdigest()


def read_file(path: pathlib.Path) -> bytes:
    return path.read_bytes()


def hash_file(path: pathlib.Path) -> str:
    return hash_bytes(read_file(path))


def compute_fingerprints(
    directory,
    exclude: Iterable[str] = (),
    log: Optional[logging.Logger] = None,
) -> FingerprintCollection:
    """
    Fingerprint every regular file directly inside `directory`.

    Subdirectories, other non-regular entries and names listed in `exclude`
    are skipped. An entry that cannot be inspected or read is left out of
    the result and recorded in `collection.warnings`; the scan itself only
    fails when the directory cannot be listed at all.
    """
    log = log or logger
    root = pathlib.Path(directory)
    skip = set(exclude)
    collection = FingerprintCollection()

    try:
        entries = os.scandir(root)
    except OSError as e:
        raise InvalidDirectory(str(root)) from e

    with entries:
        while True:
            try:
                entry = next(entries)
            except StopIteration:
                break
            except OSError as e:
                _warn(collection, log, f"Could not list directory {root}: {e}")
                break
            if entry.name in skip:
                continue
            try:
                if not entry.is_file():
                    continue
            except OSError as e:
                _warn(collection, log, f"Could not read directory entry {entry.name}: {e}")
                continue

            try:
                digest = hash_file(root / entry.name)
            except OSError as e:
                _warn(collection, log, f"Could not read file {root / entry.name}: {e}")
                continue

            collection.add(FileFingerprint(path=entry.name, digest=digest))

    if not collection.fingerprints:
        log.warning("Directory %s contains no regular files", root)

    log.info("Fingerprinted %d files in %s", len(collection), root)
    return collection


def _warn(collection: FingerprintCollection, log: logging.Logger, message: str) -> None:
    collection.warnings.append(message)
    log.warning(message)

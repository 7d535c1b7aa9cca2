import json
import logging
import os
import pathlib
import tempfile
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from config_guardian.errors import (
    BaselineCorrupt,
    BaselineMissing,
    BaselineUnreadable,
    BaselineWriteFailure,
)
from config_guardian.models import FileFingerprint, FingerprintCollection

logger = logging.getLogger("baseline_store")

_RECORD = TypeAdapter(List[FileFingerprint])


class BaselineStore:
    """
    Durable home of the trusted fingerprint collection.

    The record is a pretty-printed JSON array of {"path", "digest"} objects.
    Writes go to a temporary file next to the target which is then renamed
    over it, so readers see either the old record or the new one.
    """

    def __init__(self, path, log: Optional[logging.Logger] = None):
        self.path = pathlib.Path(path)
        self.log = log or logger

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, collection: FingerprintCollection) -> None:
        payload = json.dumps([fp.model_dump() for fp in collection], indent=2)
        parent = self.path.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=parent)
        except OSError as e:
            raise BaselineWriteFailure(str(self.path), e) from e

        tmp = pathlib.Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise BaselineWriteFailure(str(self.path), e) from e
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise

        self.log.info("Baseline saved to %s with %d files", self.path, len(collection))

    def load(self) -> FingerprintCollection:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError as e:
            raise BaselineMissing(str(self.path)) from e
        except IsADirectoryError as e:
            raise BaselineCorrupt(str(self.path), "baseline path is a directory") from e
        except OSError as e:
            raise BaselineUnreadable(str(self.path), e) from e

        try:
            entries = _RECORD.validate_json(raw)
        except ValidationError as e:
            raise BaselineCorrupt(str(self.path), _first_error(e)) from e

        try:
            collection = FingerprintCollection(entries)
        except ValueError as e:
            raise BaselineCorrupt(str(self.path), str(e)) from e

        self.log.info("Loaded baseline %s with %d files", self.path, len(collection))
        return collection


def _first_error(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]

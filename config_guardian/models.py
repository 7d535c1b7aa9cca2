from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FileFingerprint(BaseModel):
    """
    Identity of one file at one point in time.

    `path` is the file name relative to the fingerprinted directory and
    `digest` the hex BLAKE3 hash of its full content. These two field names
    are the on-disk baseline format; do not rename them.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = Field(min_length=1)
    digest: str = Field(pattern=r"^[0-9a-f]{64}$")


@dataclass
class FingerprintCollection:
    """
    A directory's state at one moment, in directory-read order.

    Paths are unique within a collection. `warnings` holds the entries that
    could not be fingerprinted; it is never persisted.
    """
    fingerprints: List[FileFingerprint] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list, compare=False)
    _index: Dict[str, FileFingerprint] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        entries = list(self.fingerprints)
        self.fingerprints = []
        for fp in entries:
            self.add(fp)

    def add(self, fingerprint: FileFingerprint) -> None:
        if fingerprint.path in self._index:
            raise ValueError(f"duplicate path in fingerprint collection: {fingerprint.path}")
        self._index[fingerprint.path] = fingerprint
        self.fingerprints.append(fingerprint)

    def get(self, path: str) -> Optional[FileFingerprint]:
        return self._index.get(path)

    def __contains__(self, path) -> bool:
        return path in self._index

    def __iter__(self) -> Iterator[FileFingerprint]:
        return iter(self.fingerprints)

    def __len__(self) -> int:
        return len(self.fingerprints)

    def as_dict(self) -> Dict[str, str]:
        return {fp.path: fp.digest for fp in self.fingerprints}


class DriftClassification(str, Enum):
    NEW = "New"
    CHANGED = "Changed"
    DELETED = "Deleted"


@dataclass(frozen=True)
class DriftRecord:
    classification: DriftClassification
    path: str

    def __str__(self):
        return f"{self.classification.value}: {self.path}"


@dataclass
class DriftReport:
    """
    Outcome of one comparison. An empty `records` list means no drift;
    `warnings` lists the files that could not be read this time.
    """
    directory: str
    records: List[DriftRecord] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def has_drift(self) -> bool:
        return bool(self.records)

    def lines(self) -> List[str]:
        return [str(r) for r in self.records]

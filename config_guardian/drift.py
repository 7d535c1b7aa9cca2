from typing import List

from config_guardian.models import DriftClassification, DriftRecord, FingerprintCollection


def compare(baseline: FingerprintCollection, current: FingerprintCollection) -> List[DriftRecord]:
    """
    Classify every path of `baseline` and `current`.

    New and Changed records come first, in `current` order, followed by
    Deleted records in `baseline` order. Unchanged paths produce nothing,
    so an empty list means no drift. Pure: touches neither disk nor logs.
    """
    records: List[DriftRecord] = []

    for curr in current:
        prev = baseline.get(curr.path)
        if prev is None:
            records.append(DriftRecord(DriftClassification.NEW, curr.path))
        elif prev.digest != curr.digest:
            records.append(DriftRecord(DriftClassification.CHANGED, curr.path))

    for prev in baseline:
        if prev.path not in current:
            records.append(DriftRecord(DriftClassification.DELETED, prev.path))

    return records

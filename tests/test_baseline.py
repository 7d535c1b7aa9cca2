import json
from pathlib import Path

import pytest

from config_guardian.baseline import BaselineStore
from config_guardian.errors import BaselineCorrupt, BaselineMissing, BaselineUnreadable, BaselineWriteFailure
from config_guardian.fingerprint import compute_fingerprints, hash_bytes
from config_guardian.models import FileFingerprint, FingerprintCollection


def test_save_then_load_round_trips(config_dir: Path, store: BaselineStore):
    collection = compute_fingerprints(config_dir)

    store.save(collection)
    loaded = store.load()

    assert loaded.as_dict() == collection.as_dict()


def test_record_is_readable_json_with_stable_field_names(store: BaselineStore):
    store.save(FingerprintCollection([FileFingerprint(path="a.txt", digest=hash_bytes(b"hello"))]))

    data = json.loads(store.path.read_text())

    assert data == [{"path": "a.txt", "digest": hash_bytes(b"hello")}]
    assert store.path.read_text().startswith("[\n  {")


def test_save_overwrites_previous_record_without_leftovers(store: BaselineStore):
    store.save(FingerprintCollection([FileFingerprint(path="old.txt", digest="0" * 64)]))
    store.save(FingerprintCollection([FileFingerprint(path="new.txt", digest="1" * 64)]))

    assert set(store.load().as_dict()) == {"new.txt"}
    assert sorted(p.name for p in store.path.parent.iterdir()) == ["snapshot.json"]


def test_failed_write_keeps_previous_record(store: BaselineStore, monkeypatch):
    store.save(FingerprintCollection([FileFingerprint(path="old.txt", digest="0" * 64)]))

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("config_guardian.baseline.os.replace", broken_replace)
    with pytest.raises(BaselineWriteFailure) as exc:
        store.save(FingerprintCollection([FileFingerprint(path="new.txt", digest="1" * 64)]))

    assert "disk full" in str(exc.value)
    assert set(store.load().as_dict()) == {"old.txt"}
    assert sorted(p.name for p in store.path.parent.iterdir()) == ["snapshot.json"]


def test_load_without_record_is_baseline_missing(store: BaselineStore):
    assert not store.exists()

    with pytest.raises(BaselineMissing) as exc:
        store.load()

    assert "Run 'snapshot' command first" in str(exc.value)


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        '{"path": "a.txt"}',
        '[{"path": "a.txt"}]',
        '[{"path": "a.txt", "digest": "xyz"}]',
        '[{"path": "a.txt", "hash": "' + "0" * 64 + '"}]',
    ],
)
def test_unparseable_record_is_baseline_corrupt(store: BaselineStore, content):
    store.path.parent.mkdir(parents=True)
    store.path.write_text(content)

    with pytest.raises(BaselineCorrupt):
        store.load()


def test_duplicate_paths_are_baseline_corrupt(store: BaselineStore):
    store.path.parent.mkdir(parents=True)
    entry = {"path": "a.txt", "digest": "0" * 64}
    store.path.write_text(json.dumps([entry, entry]))

    with pytest.raises(BaselineCorrupt) as exc:
        store.load()

    assert "duplicate path" in str(exc.value)


def test_empty_collection_round_trips(store: BaselineStore):
    store.save(FingerprintCollection())

    assert len(store.load()) == 0


def test_unreadable_record_is_reported_as_guardian_error(store: BaselineStore, monkeypatch):
    store.save(FingerprintCollection())

    def denied(self):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "read_bytes", denied)

    with pytest.raises(BaselineUnreadable) as exc:
        store.load()

    assert "Permission denied" in str(exc.value)


def test_unwritable_location_is_reported_as_guardian_error(tmp_path: Path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    store = BaselineStore(blocker / "snapshot.json")

    with pytest.raises(BaselineWriteFailure):
        store.save(FingerprintCollection())

"""
tests/test_store.py – unit tests for fieldlog/store.py
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

_HERE = Path(__file__).resolve().parent.parent
if str(_HERE) not in sys.path:
    sys.path.insert(0, str(_HERE))

from fieldlog.errors import PersistenceError
from fieldlog.models import Record
from fieldlog.store import RecordStore


def _rec(rid="20240101T100000Z-abc123", ts="2024-01-01T10:00:00Z", photo: bytes | None = b"\xff\xd8jpeg") -> Record:
    return Record(
        id=rid,
        timestamp=ts,
        latitude=35.6812362,
        longitude=139.7671248,
        accuracy=12,
        note='multi\nline, "quoted"',
        photo_name=f"{rid}.jpg" if photo else None,
        photo_mime="image/jpeg" if photo else None,
        photo_bytes=photo,
    )


@pytest.fixture
def store(tmp_path):
    return RecordStore(tmp_path / "records")


# ---------------------------------------------------------------------------
# insert / scan_all
# ---------------------------------------------------------------------------

def test_scan_empty_store_without_directory(store):
    assert store.scan_all() == []


def test_insert_then_scan_returns_equal_record(store):
    rec = _rec()
    store.insert(rec)
    found = [r for r in store.scan_all() if r.id == rec.id]
    assert found == [rec]
    assert found[0].photo_bytes == b"\xff\xd8jpeg"


def test_record_without_photo_round_trips(store):
    rec = _rec(photo=None)
    store.insert(rec)
    (loaded,) = store.scan_all()
    assert loaded == rec
    assert not loaded.has_photo


def test_binary_payload_survives_all_byte_values(store):
    payload = bytes(range(256)) * 4
    store.insert(_rec(photo=payload))
    assert store.scan_all()[0].photo_bytes == payload


def test_insert_is_upsert(store):
    rec = _rec()
    store.insert(rec)
    rec.note = "retry"
    store.insert(rec)
    records = store.scan_all()
    assert len(records) == 1
    assert records[0].note == "retry"


def test_ids_with_path_characters_are_safe(store):
    rec = _rec(rid="../../etc/passwd")
    store.insert(rec)
    assert store.get("../../etc/passwd") == rec
    assert all(p.parent == store.root for p in store.root.iterdir())


def test_get_missing_returns_none(store):
    assert store.get("nope") is None


def test_list_recent_is_newest_first(store):
    store.insert(_rec("a", ts="2024-01-01T09:00:00Z"))
    store.insert(_rec("b", ts="2024-01-01T11:00:00Z"))
    store.insert(_rec("c", ts="2024-01-01T10:00:00Z"))
    assert [r.id for r in store.list_recent()] == ["b", "c", "a"]


def test_no_temp_files_left_behind(store):
    store.insert(_rec())
    assert [p.suffix for p in store.root.iterdir()] == [".json"]


# ---------------------------------------------------------------------------
# delete_by_id / clear
# ---------------------------------------------------------------------------

def test_delete_removes_record(store):
    store.insert(_rec("keep"))
    store.insert(_rec("drop"))
    assert store.delete_by_id("drop") is True
    assert [r.id for r in store.scan_all()] == ["keep"]


def test_delete_missing_id_is_not_an_error(store):
    assert store.delete_by_id("ghost") is False
    store.insert(_rec("x"))
    assert store.delete_by_id("ghost") is False
    assert len(store.scan_all()) == 1


def test_clear_removes_everything(store):
    for i in range(3):
        store.insert(_rec(f"r{i}"))
    assert store.clear() == 3
    assert store.scan_all() == []
    assert store.clear() == 0


# ---------------------------------------------------------------------------
# Corrupt documents and failures
# ---------------------------------------------------------------------------

def test_corrupt_document_is_skipped(store):
    store.insert(_rec("good"))
    (store.root / "broken.json").write_text("{not json", encoding="utf-8")
    assert [r.id for r in store.scan_all()] == ["good"]


def test_unknown_schema_is_skipped(store):
    store.insert(_rec("good"))
    doc = {"schema": 99, "record": _rec("future").as_dict()}
    (store.root / "future.json").write_text(json.dumps(doc), encoding="utf-8")
    assert [r.id for r in store.scan_all()] == ["good"]


def test_document_with_unexpected_fields_is_skipped(store):
    store.insert(_rec("good"))
    doc = {"schema": 1, "record": {"id": "x", "bogus": 1}}
    (store.root / "odd.json").write_text(json.dumps(doc), encoding="utf-8")
    assert [r.id for r in store.scan_all()] == ["good"]


def test_insert_failure_raises_persistence_error(tmp_path):
    blocker = tmp_path / "records"
    blocker.write_text("not a directory", encoding="utf-8")
    with pytest.raises(PersistenceError):
        RecordStore(blocker).insert(_rec())


def test_default_root_comes_from_config(monkeypatch, tmp_path):
    monkeypatch.setattr("fieldlog.config.RECORDS_DIR", tmp_path / "cfg_records")
    assert RecordStore().root == tmp_path / "cfg_records"


def test_non_utf8_document_is_skipped(store):
    store.insert(_rec("good"))
    (store.root / "bad.json").write_bytes(b"\xff\xfe{")
    assert [r.id for r in store.scan_all()] == ["good"]
    assert [r.id for r in store.list_recent()] == ["good"]


@pytest.mark.parametrize("payload", [[1, 2], "text", 42, None])
def test_non_object_document_is_skipped(store, payload):
    store.insert(_rec("good"))
    (store.root / "bad.json").write_text(json.dumps(payload), encoding="utf-8")
    assert [r.id for r in store.scan_all()] == ["good"]


def test_non_object_record_payload_is_skipped(store):
    store.insert(_rec("good"))
    doc = {"schema": 1, "record": [1, 2]}
    (store.root / "bad.json").write_text(json.dumps(doc), encoding="utf-8")
    assert [r.id for r in store.scan_all()] == ["good"]


def test_unreadable_document_raises_persistence_error(store):
    store.insert(_rec("good"))
    (store.root / "blocked.json").mkdir()
    with pytest.raises(PersistenceError):
        store.scan_all()


def test_clear_counts_only_documents_it_removed(store, monkeypatch):
    store.insert(_rec("a"))
    listed = store._doc_paths() + [store.root / "already-gone.json"]
    monkeypatch.setattr(store, "_doc_paths", lambda: listed)
    assert store.clear() == 1

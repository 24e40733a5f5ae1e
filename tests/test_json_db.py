# tests/test_json_db.py

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from quantum.errors import NotFoundError, StorageError
from quantum.tasks.json_db import JsonDB
from quantum.tasks.task_store import TaskStore


def _write_raw(data_dir: Path, collection: str, key: str, doc: object) -> None:
    cdir = data_dir / collection
    cdir.mkdir(parents=True, exist_ok=True)
    (cdir / f"{key}.json").write_text(json.dumps(doc), "utf-8")


def test_read_write_delete(tmp_path: Path) -> None:
    db = JsonDB(tmp_path / "db")

    db.write("things", "k1", {"a": 1})
    assert db.read("things", "k1") == {"a": 1}
    assert db.exists("things", "k1")
    assert db.count("things") == 1

    db.delete("things", "k1")
    assert not db.exists("things", "k1")
    with pytest.raises(NotFoundError):
        db.read("things", "k1")
    with pytest.raises(NotFoundError):
        db.delete("things", "k1")


def test_write_leaves_no_temp_files(tmp_path: Path) -> None:
    db = JsonDB(tmp_path)
    db.write("things", "k1", {"a": 1})
    db.write("things", "k1", {"a": 2})

    assert sorted(p.name for p in (tmp_path / "things").iterdir()) == ["k1.json"]
    assert db.read("things", "k1") == {"a": 2}


def test_missing_collection_reads_empty(tmp_path: Path) -> None:
    db = JsonDB(tmp_path)
    assert db.read_all("nothing") == []
    assert db.count("nothing") == 0
    db.drop("nothing")


def test_keys_with_separators_round_trip(store: TaskStore) -> None:
    store.start_task("client/feature 100%", "R")
    assert [e.name for e in store.list_inprogress()] == ["client/feature 100%"]

    store.stop_task("client/feature 100%")
    assert store.list_inprogress() == []
    assert store.list_tasks()[0].name == "client/feature 100%"


def test_invalid_keys_are_rejected(tmp_path: Path) -> None:
    db = JsonDB(tmp_path)
    for key in ("", ".", ".."):
        with pytest.raises(StorageError):
            db.write("things", key, {})


def test_legacy_integer_hours_and_nanosecond_timestamps(data_dir: Path, store: TaskStore) -> None:
    _write_raw(
        data_dir,
        "tasks",
        "1FqEyWHDXbNhn4K0TVgYzmYs9pv",
        {
            "Name": "old",
            "Hours": 3,
            "Ref": "",
            "Uid": "1FqEyWHDXbNhn4K0TVgYzmYs9pv",
            "Date": "2019-05-01T10:11:12.123456789+02:00",
        },
    )
    _write_raw(
        data_dir,
        "tasks",
        "1FqEyWHDXbNhn4K0TVgYzmYs9pw",
        {"Name": "no-ref", "Hours": 0.5, "Date": "2019-05-02T08:00:00Z"},
    )

    old, no_ref = store.list_tasks()

    assert old.hours == 3.0
    assert isinstance(old.hours, float)
    assert old.date == datetime(2019, 5, 1, 10, 11, 12, 123456, tzinfo=timezone(timedelta(hours=2)))

    assert no_ref.ref == ""
    assert no_ref.uid == "1FqEyWHDXbNhn4K0TVgYzmYs9pw"
    assert no_ref.date == datetime(2019, 5, 2, 8, 0, tzinfo=timezone.utc)
    assert store.filter_tasks().total_hours == pytest.approx(3.5)


def test_legacy_inprogress_document(data_dir: Path, store: TaskStore) -> None:
    _write_raw(
        data_dir,
        "inprogress",
        "build",
        {"Name": "build", "Ref": "CI", "StartTime": "2026-03-31T11:00:00.000000001+02:00"},
    )

    done = store.stop_task("build")

    assert done.hours == pytest.approx(1.0)
    assert done.ref == "CI"


@pytest.mark.parametrize(
    "doc",
    [
        ["not", "an", "object"],
        {"Hours": 1, "Date": "2019-05-01T10:00:00Z"},
        {"Name": "x", "Hours": "1", "Date": "2019-05-01T10:00:00Z"},
        {"Name": "x", "Hours": 1, "Date": "yesterday"},
        {"Name": "x", "Hours": 1},
    ],
)
def test_malformed_documents_raise_storage_error(data_dir: Path, store: TaskStore, doc: object) -> None:
    _write_raw(data_dir, "tasks", "bad", doc)
    with pytest.raises(StorageError):
        store.list_tasks()


def test_corrupt_json_raises_storage_error(data_dir: Path, store: TaskStore) -> None:
    cdir = data_dir / "tasks"
    cdir.mkdir(parents=True)
    (cdir / "broken.json").write_text("{not json", "utf-8")

    with pytest.raises(StorageError):
        store.filter_tasks()


def test_failed_write_removes_temp_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    db = JsonDB(tmp_path)

    def _fail(src: object, dst: object) -> None:
        raise OSError("disk full")

    monkeypatch.setattr("quantum.tasks.json_db.os.replace", _fail)

    with pytest.raises(StorageError, match="disk full"):
        db.write("things", "k1", {"a": 1})
    assert list((tmp_path / "things").iterdir()) == []

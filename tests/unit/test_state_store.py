"""
Unit tests for the key-value state stores.
"""

from datetime import datetime

import pytest

from studyplan.delivery.state_store import (
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    SqliteStore,
    StoreError,
)
from studyplan.review.tracker import SpacedRepetitionTracker


class FailingStore:
    """Store whose writes always fail."""

    def load(self, key):
        return None

    def save(self, key, blob):
        raise StoreError("disk full")


@pytest.fixture(params=["memory", "json", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        yield MemoryStore()
    elif request.param == "json":
        yield JsonFileStore(tmp_path / "json")
    else:
        store = SqliteStore(tmp_path / "state.db")
        yield store
        store.close()


class TestStoreContract:
    def test_implements_protocol(self, store):
        assert isinstance(store, KeyValueStore)

    def test_missing_key(self, store):
        assert store.load("nothing") is None

    def test_save_then_load(self, store):
        store.save("flashcardHistory", {"c1": {"interval": 6}})
        assert store.load("flashcardHistory") == {"c1": {"interval": 6}}

    def test_overwrite(self, store):
        store.save("schedule", [1, 2])
        store.save("schedule", [3])
        assert store.load("schedule") == [3]

    def test_unserializable_blob(self, store):
        with pytest.raises(StoreError):
            store.save("bad", {"when": datetime(2026, 3, 2)})


class TestJsonFileStore:
    def test_one_file_per_key(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.save("studyMetrics", [])

        assert (tmp_path / "studyMetrics.json").exists()
        assert not list(tmp_path.glob("*.tmp"))

    def test_corrupt_file(self, tmp_path):
        (tmp_path / "schedule.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(StoreError):
            JsonFileStore(tmp_path).load("schedule")

    def test_failed_write_keeps_previous_value(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.save("schedule", [1])

        with pytest.raises(StoreError):
            store.save("schedule", [object()])

        assert store.load("schedule") == [1]


class TestSqliteStore:
    def test_persists_across_connections(self, tmp_path):
        path = tmp_path / "state.db"
        first = SqliteStore(path)
        first.save("subjectWeights", [["A", 2.0]])
        first.close()

        second = SqliteStore(path)
        assert second.load("subjectWeights") == [["A", 2.0]]
        second.close()


def test_failed_save_leaves_tracker_untouched(now):
    tracker = SpacedRepetitionTracker()
    tracker.record_response("c1", True, now=now)
    before = tracker.to_snapshot()

    with pytest.raises(StoreError):
        tracker.save(FailingStore())

    assert tracker.to_snapshot() == before

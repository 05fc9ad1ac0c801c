"""Tests for ManifestStore: the SQLite-backed manifest."""

from __future__ import annotations

import sqlite3
import threading

import pytest

from wise.manifest import ManifestEntry, ManifestStats, ManifestStore


def _entry(path: str = "/srv/site/a.md", **overrides) -> ManifestEntry:
    defaults = dict(path=path, size=10, mtime=1_000, last_checked=5_000, hash=None)
    defaults.update(overrides)
    return ManifestEntry(**defaults)


# ---------------------------------------------------------------------------
# Point operations
# ---------------------------------------------------------------------------


class TestRowOperations:
    def test_get_missing_returns_none(self, store: ManifestStore):
        assert store.get("/nope") is None

    def test_upsert_then_get(self, store: ManifestStore):
        entry = _entry(hash="ab" * 32)
        store.upsert(entry)
        assert store.get(entry.path) == entry

    def test_upsert_overwrites_every_column(self, store: ManifestStore):
        store.upsert(_entry(hash="old"))
        store.upsert(_entry(size=99, mtime=2_000, last_checked=6_000, hash=None))

        got = store.get("/srv/site/a.md")
        assert got.size == 99
        assert got.mtime == 2_000
        assert got.last_checked == 6_000
        assert got.hash is None

    def test_upsert_never_duplicates(self, store: ManifestStore):
        for i in range(5):
            store.upsert(_entry(size=i))
        assert store.aggregate().total_entries == 1

    def test_touch_only_updates_last_checked(self, store: ManifestStore):
        store.upsert(_entry(hash="h"))
        store.touch("/srv/site/a.md", 9_999)

        got = store.get("/srv/site/a.md")
        assert got.last_checked == 9_999
        assert (got.size, got.mtime, got.hash) == (10, 1_000, "h")

    def test_touch_missing_row_is_noop(self, store: ManifestStore):
        store.touch("/nope", 1)
        assert store.get("/nope") is None

    def test_delete(self, store: ManifestStore):
        store.upsert(_entry())
        store.delete("/srv/site/a.md")
        assert store.get("/srv/site/a.md") is None


# ---------------------------------------------------------------------------
# Bulk operations
# ---------------------------------------------------------------------------


class TestBulkOperations:
    def test_delete_older_than_counts_rows(self, store: ManifestStore):
        store.upsert(_entry("/a", last_checked=100))
        store.upsert(_entry("/b", last_checked=200))
        store.upsert(_entry("/c", last_checked=300))

        assert store.delete_older_than(250) == 2
        assert store.get("/a") is None
        assert store.get("/b") is None
        assert store.get("/c") is not None

    def test_delete_older_than_is_strict(self, store: ManifestStore):
        store.upsert(_entry("/a", last_checked=100))
        assert store.delete_older_than(100) == 0

    def test_aggregate_empty(self, store: ManifestStore):
        assert store.aggregate() == ManifestStats()

    def test_aggregate(self, store: ManifestStore):
        store.upsert(_entry("/a", size=100, hash="x"))
        store.upsert(_entry("/b", size=50))
        store.upsert(_entry("/c", size=1, hash="y"))

        stats = store.aggregate()
        assert stats.total_entries == 3
        assert stats.entries_with_hash == 2
        assert stats.total_size_bytes == 151

    def test_last_checked_is_indexed(self, store: ManifestStore):
        conn = sqlite3.connect(store.db_path)
        try:
            indexed = {
                row[0]
                for row in conn.execute(
                    "SELECT name FROM sqlite_master WHERE type = 'index' AND tbl_name = 'manifest'"
                )
            }
        finally:
            conn.close()
        assert "idx_manifest_last_checked" in indexed


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_creates_parent_directory(self, tmp_path):
        db = tmp_path / "deep" / "nested" / "m.sqlite"
        with ManifestStore(db):
            assert db.parent.is_dir()

    def test_reopen_keeps_rows(self, tmp_path):
        db = tmp_path / "m.sqlite"
        with ManifestStore(db) as first:
            first.upsert(_entry(hash="keep"))

        with ManifestStore(db) as second:
            assert second.get("/srv/site/a.md").hash == "keep"

    def test_in_memory_store(self):
        with ManifestStore(":memory:") as s:
            s.upsert(_entry())
            assert s.get("/srv/site/a.md") is not None


# ---------------------------------------------------------------------------
# Thread safety
# ---------------------------------------------------------------------------


class TestConcurrency:
    def test_parallel_upserts_of_distinct_paths(self, store: ManifestStore):
        def _writer(n: int) -> None:
            for i in range(50):
                store.upsert(_entry(f"/t{n}/f{i}", size=i))

        threads = [threading.Thread(target=_writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        stats = store.aggregate()
        assert stats.total_entries == 200
        assert stats.total_size_bytes == 4 * sum(range(50))

"""ManifestStore backed by a local SQLite database."""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path

from wise.manifest.models import ManifestEntry, ManifestStats

logger = logging.getLogger(__name__)

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS manifest (
    path TEXT PRIMARY KEY,
    size INTEGER NOT NULL,
    mtime INTEGER NOT NULL,
    hash TEXT,
    last_checked INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_manifest_mtime ON manifest(mtime);
CREATE INDEX IF NOT EXISTS idx_manifest_last_checked ON manifest(last_checked);
"""

_COLUMNS = "path, size, mtime, hash, last_checked"


class ManifestStore:
    """Durable path -> ManifestEntry mapping using SQLite with WAL mode.

    One connection is shared by every thread; statements are serialized
    behind a lock so a reader never sees a half-written row. Opening an
    existing database leaves its rows untouched.
    """

    def __init__(self, db_path: str | Path = ".temp/.wise.sqlite") -> None:
        db_path = str(db_path)
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.db_path = db_path
        self._lock = threading.RLock()
        # isolation_level=None => autocommit; multi-statement units use
        # an explicit BEGIN IMMEDIATE.
        self._conn = sqlite3.connect(
            db_path, isolation_level=None, timeout=5, check_same_thread=False
        )
        if db_path != ":memory:":
            self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        logger.debug("Opened manifest at %s", db_path)

    # -- helpers ---------------------------------------------------------------

    @staticmethod
    def _row_to_entry(row: tuple) -> ManifestEntry:
        path, size, mtime, hash_, last_checked = row
        return ManifestEntry(
            path=path,
            size=size,
            mtime=mtime,
            hash=hash_,
            last_checked=last_checked,
        )

    # -- row operations --------------------------------------------------------

    def get(self, path: str) -> ManifestEntry | None:
        """Return the entry for *path*, or None."""
        with self._lock:
            row = self._conn.execute(
                f"SELECT {_COLUMNS} FROM manifest WHERE path = ?", (path,)
            ).fetchone()
        return self._row_to_entry(row) if row is not None else None

    def upsert(self, entry: ManifestEntry) -> None:
        """Insert *entry*, or overwrite every column of the existing row."""
        with self._lock:
            self._conn.execute(
                f"INSERT OR REPLACE INTO manifest ({_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
                (entry.path, entry.size, entry.mtime, entry.hash, entry.last_checked),
            )

    def touch(self, path: str, last_checked: int) -> None:
        """Update only the check timestamp of *path*."""
        with self._lock:
            self._conn.execute(
                "UPDATE manifest SET last_checked = ? WHERE path = ?",
                (last_checked, path),
            )

    def delete(self, path: str) -> None:
        with self._lock:
            self._conn.execute("DELETE FROM manifest WHERE path = ?", (path,))

    # -- bulk operations -------------------------------------------------------

    def delete_older_than(self, threshold: int) -> int:
        """Delete rows last checked before *threshold* (ms). Returns the count."""
        with self._lock:
            cursor = self._conn.execute(
                "DELETE FROM manifest WHERE last_checked < ?", (threshold,)
            )
        return cursor.rowcount

    def aggregate(self) -> ManifestStats:
        """Count rows, hashed rows and the summed size in one snapshot."""
        with self._lock:
            cursor = self._conn.cursor()
            try:
                cursor.execute("BEGIN")
                total, total_size = cursor.execute(
                    "SELECT COUNT(*), COALESCE(SUM(size), 0) FROM manifest"
                ).fetchone()
                with_hash = cursor.execute(
                    "SELECT COUNT(*) FROM manifest WHERE hash IS NOT NULL"
                ).fetchone()[0]
                cursor.execute("COMMIT")
            except Exception:
                self._conn.rollback()
                raise
        return ManifestStats(
            total_entries=total,
            entries_with_hash=with_hash,
            total_size_bytes=total_size,
        )

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> ManifestStore:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

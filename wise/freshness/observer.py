"""ObservationService: refreshes manifest rows from the live filesystem."""

from __future__ import annotations

import hashlib
import logging
import os
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager

from wise.filesystem import FileSystem, LocalFileSystem
from wise.freshness.models import FileStatus, Observation
from wise.manifest.models import ManifestEntry
from wise.manifest.store import ManifestStore

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class _PathLocks:
    """Hands out one lock per path, dropping it once nobody holds it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, tuple[threading.Lock, int]] = {}

    @contextmanager
    def hold(self, path: str) -> Iterator[None]:
        with self._guard:
            lock, users = self._locks.get(path, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._locks[path] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._guard:
                lock, users = self._locks[path]
                if users == 1:
                    del self._locks[path]
                else:
                    self._locks[path] = (lock, users - 1)


class ObservationService:
    """The single path through which manifest rows are refreshed.

    Every call stats the file and writes back to the manifest, either a
    full row rewrite (new file, size/mtime change, or first hash request)
    or a ``last_checked`` touch. Content is digested at most once per
    change; ``hash_count`` counts digests computed so far.
    """

    def __init__(
        self,
        store: ManifestStore,
        fs: FileSystem | None = None,
        algorithm: str = "sha256",
    ) -> None:
        if algorithm not in hashlib.algorithms_available:
            raise ValueError(f"Unsupported hash algorithm: {algorithm}")
        self.store = store
        self.fs = fs or LocalFileSystem()
        self.algorithm = algorithm
        self.hash_count = 0
        self._counter_lock = threading.Lock()
        self._locks = _PathLocks()

    def compute_hash(self, path: str) -> str:
        """Digest the full content of *path* as a hex string."""
        digest = hashlib.new(self.algorithm, self.fs.read(path)).hexdigest()
        with self._counter_lock:
            self.hash_count += 1
        return digest

    def observe(self, path: str | os.PathLike, hash: bool = False) -> Observation:
        """Stat *path*, reconcile the manifest row, and report what is there.

        Missing paths have their row deleted and come back with
        ``exists=False``. Any OSError other than FileNotFoundError
        propagates.
        """
        path = os.path.abspath(path)
        with self._locks.hold(path):
            return self._observe_locked(path, hash)

    def stat(self, path: str | os.PathLike, hash: bool = False) -> FileStatus:
        """Observe *path* and describe how it changed since the last observation.

        Raises FileNotFoundError when the path does not exist.
        """
        path = os.path.abspath(path)
        with self._locks.hold(path):
            previous = self.store.get(path)
            obs = self._observe_locked(path, hash)

        if not obs.exists:
            raise FileNotFoundError(f"no such file or directory: {path!r}")
        if previous is None:
            return FileStatus(observation=obs)

        return FileStatus(
            observation=obs,
            changed=previous.mtime != obs.mtime or previous.size != obs.size,
            size_changed=previous.size != obs.size,
            content_changed=bool(
                hash and previous.hash and previous.hash != obs.hash
            ),
            previous_size=previous.size,
            previous_mtime=previous.mtime,
        )

    def _observe_locked(self, path: str, want_hash: bool) -> Observation:
        try:
            st = self.fs.stat(path)
        except FileNotFoundError:
            self.store.delete(path)
            logger.debug("Observed %s: missing", path)
            return Observation.missing(path)

        size, mtime = st.size, st.mtime_ms
        needs_digest = want_hash and st.is_file
        existing = self.store.get(path)
        now = _now_ms()

        unchanged = (
            existing is not None
            and existing.size == size
            and existing.mtime == mtime
        )
        if unchanged and (existing.hash is not None or not needs_digest):
            last_checked = max(now, existing.last_checked)
            self.store.touch(path, last_checked)
            return Observation(
                path=path,
                exists=True,
                size=size,
                mtime=mtime,
                hash=existing.hash,
                last_checked=last_checked,
            )

        digest = self.compute_hash(path) if needs_digest else None
        last_checked = now if existing is None else max(now, existing.last_checked)
        self.store.upsert(ManifestEntry(
            path=path,
            size=size,
            mtime=mtime,
            hash=digest,
            last_checked=last_checked,
        ))
        logger.debug(
            "Observed %s: %s (size=%d mtime=%d)",
            path,
            "new" if existing is None else "changed",
            size,
            mtime,
        )
        return Observation(
            path=path,
            exists=True,
            size=size,
            mtime=mtime,
            hash=digest,
            last_checked=last_checked,
        )

"""SyncEngine: copies files and directory trees, skipping unchanged files."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from wise.errors import CopyCancelledError, InvalidOperationError, SourceNotFoundError
from wise.freshness.models import Observation
from wise.freshness.observer import ObservationService
from wise.sync.models import CopyResult

logger = logging.getLogger(__name__)

PathFilter = Callable[[str], bool]


class SyncEngine:
    """Smart copy on top of the manifest.

    A file is copied only when the destination is missing, differs in
    size, is older than the source, or (with ``hash=True``) has different
    content. Directory copies fan file copies out over at most
    ``max_workers`` threads; each single-file copy runs start to finish on
    one thread.
    """

    def __init__(self, observer: ObservationService, max_workers: int = 4) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self.observer = observer
        self.fs = observer.fs
        self.max_workers = max_workers

    # -- single file -----------------------------------------------------------

    def copy_file(
        self,
        src: str | os.PathLike,
        dest: str | os.PathLike,
        hash: bool = False,
        force: bool = False,
        preserve_timestamps: bool = True,
    ) -> CopyResult:
        """Copy *src* to *dest* unless *dest* is already up to date.

        Raises SourceNotFoundError when *src* does not exist and
        InvalidOperationError when it is not a regular file.
        """
        src, dest = os.path.abspath(src), os.path.abspath(dest)
        try:
            st = self.fs.stat(src)
        except FileNotFoundError:
            raise SourceNotFoundError(src) from None
        if not st.is_file:
            raise InvalidOperationError(f"not a regular file: {src!r}")

        src_obs = self.observer.observe(src, hash=hash)
        if not src_obs.exists:
            raise SourceNotFoundError(src)

        if not force and not self._needs_copy(src_obs, dest, hash):
            logger.debug("Skipping %s: up to date", dest)
            return CopyResult(src=src, dest=dest, copied=False, reason="up-to-date")

        self.fs.mkdir_all(os.path.dirname(dest))
        self.fs.copy_bytes(src, dest)
        if preserve_timestamps:
            st = self.fs.stat(src)
            self.fs.set_times(dest, st.atime_ns, st.mtime_ns)
        self.observer.observe(dest, hash=hash)

        logger.info("Copied %s -> %s", src, dest)
        return CopyResult(src=src, dest=dest, copied=True)

    def _needs_copy(self, src_obs: Observation, dest: str, hash: bool) -> bool:
        dest_obs = self.observer.observe(dest, hash=hash)
        if not dest_obs.exists:
            return True
        if src_obs.size != dest_obs.size or src_obs.mtime > dest_obs.mtime:
            return True
        if hash and src_obs.hash and dest_obs.hash:
            return src_obs.hash != dest_obs.hash
        return False

    # -- directory -------------------------------------------------------------

    def copy_directory(
        self,
        src: str | os.PathLike,
        dest: str | os.PathLike,
        hash: bool = False,
        force: bool = False,
        preserve_timestamps: bool = True,
        filter: PathFilter | None = None,
        cancel: threading.Event | None = None,
    ) -> list[CopyResult]:
        """Recursively copy the tree at *src* into *dest*.

        Entries rejected by *filter* (called with the source path) are
        neither copied nor descended into. Symlinks and special files are
        ignored. Results follow directory enumeration order.

        If *cancel* is set while the copy runs, files not yet started are
        skipped and CopyCancelledError is raised with the finished results.
        The first error stops files not yet started, lets in-flight copies
        finish and propagates. Already-copied files are left in place.
        """
        src, dest = os.path.abspath(src), os.path.abspath(dest)
        try:
            st = self.fs.stat(src)
        except FileNotFoundError:
            raise SourceNotFoundError(src) from None
        if not st.is_dir:
            raise InvalidOperationError(f"not a directory: {src!r}")

        plan: list[tuple[str, str]] = []
        self._plan_tree(src, dest, filter, plan)
        logger.debug("Planned %d file(s) under %s", len(plan), src)

        # Set by the first failing copy so queued files are never started.
        failed = threading.Event()

        def _copy_one(pair: tuple[str, str]) -> CopyResult | None:
            if failed.is_set() or (cancel is not None and cancel.is_set()):
                return None
            try:
                return self.copy_file(
                    pair[0],
                    pair[1],
                    hash=hash,
                    force=force,
                    preserve_timestamps=preserve_timestamps,
                )
            except BaseException:
                failed.set()
                raise

        if self.max_workers == 1 or len(plan) <= 1:
            outcomes = []
            for pair in plan:
                outcome = _copy_one(pair)
                if outcome is None:
                    break
                outcomes.append(outcome)
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                futures = [pool.submit(_copy_one, pair) for pair in plan]
                try:
                    outcomes = [f.result() for f in futures]
                except BaseException:
                    failed.set()
                    pool.shutdown(wait=True, cancel_futures=True)
                    raise

        results = [r for r in outcomes if r is not None]
        if cancel is not None and cancel.is_set() and len(results) < len(plan):
            raise CopyCancelledError(src, results)
        return results

    def _plan_tree(
        self,
        src: str,
        dest: str,
        filter: PathFilter | None,
        plan: list[tuple[str, str]],
    ) -> None:
        """Create destination directories and collect (src, dest) file pairs."""
        self.fs.mkdir_all(dest)
        for entry in self.fs.list_entries(src):
            src_path = os.path.join(src, entry.name)
            dest_path = os.path.join(dest, entry.name)
            if filter is not None and not filter(src_path):
                continue
            if entry.is_dir:
                self._plan_tree(src_path, dest_path, filter, plan)
            elif entry.is_file:
                plan.append((src_path, dest_path))

    # -- dispatch --------------------------------------------------------------

    def copy(
        self,
        src: str | os.PathLike,
        dest: str | os.PathLike,
        recursive: bool = False,
        hash: bool = False,
        force: bool = False,
        preserve_timestamps: bool = True,
        filter: PathFilter | None = None,
        cancel: threading.Event | None = None,
    ) -> CopyResult | list[CopyResult]:
        """Copy a file or, with ``recursive=True``, a directory tree."""
        try:
            st = self.fs.stat(src)
        except FileNotFoundError:
            raise SourceNotFoundError(os.path.abspath(src)) from None

        if st.is_dir:
            if not recursive:
                raise InvalidOperationError(
                    f"{os.fspath(src)!r} is a directory; pass recursive=True to copy it"
                )
            return self.copy_directory(
                src,
                dest,
                hash=hash,
                force=force,
                preserve_timestamps=preserve_timestamps,
                filter=filter,
                cancel=cancel,
            )
        return self.copy_file(
            src, dest, hash=hash, force=force, preserve_timestamps=preserve_timestamps
        )

"""Staleness and difference checks built on observations."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable

from wise.errors import InvalidOperationError
from wise.freshness.models import FileDiff, FileSnapshot, Observation
from wise.freshness.observer import ObservationService

logger = logging.getLogger(__name__)

PathLike = str | os.PathLike


def _snapshot(obs: Observation) -> FileSnapshot:
    return FileSnapshot(size=obs.size, mtime=obs.mtime, hash=obs.hash)


def _as_list(sources: PathLike | Iterable[PathLike]) -> list[PathLike]:
    if isinstance(sources, (str, os.PathLike)):
        return [sources]
    return list(sources)


class ChangeDetector:
    """Answers "is this target stale?" and "do these two files differ?".

    Never touches the filesystem directly; everything goes through the
    ObservationService so the manifest stays current.
    """

    def __init__(self, observer: ObservationService) -> None:
        self.observer = observer

    def is_stale(
        self,
        target: PathLike,
        sources: PathLike | Iterable[PathLike],
        hash: bool = False,
    ) -> bool:
        """Return True if *target* needs to be (re)generated from *sources*.

        A missing target is always stale. Missing sources are skipped. A
        source is newer when its mtime is later than the target's; with
        ``hash=True`` a content mismatch also counts.
        """
        target_obs = self.observer.observe(target, hash=hash)
        if not target_obs.exists:
            logger.debug("%s is stale: target missing", target_obs.path)
            return True

        for source in _as_list(sources):
            source_obs = self.observer.observe(source, hash=hash)
            if not source_obs.exists:
                continue
            if source_obs.mtime > target_obs.mtime:
                logger.debug("%s is stale: %s is newer", target_obs.path, source_obs.path)
                return True
            if hash and source_obs.hash and target_obs.hash and source_obs.hash != target_obs.hash:
                logger.debug("%s is stale: content differs from %s", target_obs.path, source_obs.path)
                return True

        return False

    def is_fresh(
        self,
        target: PathLike,
        sources: PathLike | Iterable[PathLike],
        hash: bool = False,
    ) -> bool:
        return not self.is_stale(target, sources, hash=hash)

    def diff(self, first: PathLike, second: PathLike, hash: bool = False) -> FileDiff | None:
        """Compare two files. Returns None when they are equivalent.

        Size is checked first and is conclusive on its own. With
        ``hash=True`` equal digests mean equal files regardless of mtime;
        without it, equal sizes fall back to comparing mtimes. A content
        comparison involving a directory raises InvalidOperationError.
        """
        a = self.observer.observe(first)
        b = self.observer.observe(second)

        if not a.exists:
            return FileDiff(reason="file-missing", which="first")
        if not b.exists:
            return FileDiff(reason="file-missing", which="second")

        if a.size != b.size:
            return FileDiff(reason="size", first=_snapshot(a), second=_snapshot(b))

        if hash:
            # Observing again with hash=True computes (and persists) any
            # digest that is missing or belongs to an older version.
            a = self.observer.observe(first, hash=True)
            b = self.observer.observe(second, hash=True)
            if not a.exists or not b.exists:
                return FileDiff(reason="file-missing", which="first" if not a.exists else "second")
            # Only regular files get a digest.
            if a.hash is None or b.hash is None:
                raise InvalidOperationError(
                    f"content diff needs two regular files: {a.path!r}, {b.path!r}"
                )
            if a.hash == b.hash:
                return None
            return FileDiff(reason="content", first=_snapshot(a), second=_snapshot(b))

        if a.mtime != b.mtime:
            return FileDiff(reason="mtime", first=_snapshot(a), second=_snapshot(b))
        return None

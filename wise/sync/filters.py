"""Path filters for directory copies."""

from __future__ import annotations

import fnmatch
import os

from wise.sync.engine import PathFilter


def ignore_filter(
    patterns: list[str], root: str | os.PathLike | None = None
) -> PathFilter | None:
    """Build a filter rejecting paths whose basename matches any glob in *patterns*.

    Patterns containing '/' are matched against the path relative to
    *root* (the copy source), using '/' separators. Without a root they are
    matched against the full path. Returns None for an empty pattern list
    so callers can skip filtering.
    """
    if not patterns:
        return None
    patterns = list(patterns)
    base = os.path.abspath(root) if root is not None else None

    def _relative(path: str) -> str:
        if base is None:
            return path
        rel = os.path.relpath(os.path.abspath(path), base)
        return rel.replace(os.sep, "/")

    def _keep(path: str) -> bool:
        name = os.path.basename(path)
        for pattern in patterns:
            target = _relative(path) if "/" in pattern else name
            if fnmatch.fnmatch(target, pattern):
                return False
        return True

    return _keep

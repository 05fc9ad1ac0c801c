"""Exception types raised by wise."""

from __future__ import annotations


class WiseError(Exception):
    """Base class for wise errors."""


class SourceNotFoundError(WiseError, FileNotFoundError):
    """A copy was requested for a source path that does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"no such file or directory: {path!r}")


class InvalidOperationError(WiseError, ValueError):
    """An operation was asked to do something it does not support."""


class CopyCancelledError(WiseError):
    """A directory copy was cancelled between files.

    ``results`` holds the per-file outcomes that finished before the
    cancellation was observed.
    """

    def __init__(self, src: str, results: list) -> None:
        self.src = src
        self.results = results
        super().__init__(f"copy of {src!r} cancelled after {len(results)} file(s)")

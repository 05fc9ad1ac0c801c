"""Data models for the file manifest."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel


@dataclass(frozen=True)
class ManifestEntry:
    """Last observed metadata for one filesystem path.

    ``mtime`` and ``last_checked`` are integer milliseconds since the epoch.
    ``hash`` is only meaningful while ``size`` and ``mtime`` still match
    the file on disk.
    """

    path: str
    size: int
    mtime: int
    last_checked: int
    hash: str | None = None


class ManifestStats(BaseModel):
    """Manifest-wide aggregates."""

    total_entries: int = 0
    entries_with_hash: int = 0
    total_size_bytes: int = 0


class CleanResult(BaseModel):
    """Outcome of a retention cleanup."""

    deleted: int = 0

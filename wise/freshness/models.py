"""Result types produced by observation and change detection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class Observation:
    """What one observation found on disk.

    ``exists`` is False when the path is absent; every other field is then
    None. Genuine I/O failures are raised, never folded into this type.
    """

    path: str
    exists: bool
    size: int | None = None
    mtime: int | None = None
    hash: str | None = None
    last_checked: int | None = None

    @classmethod
    def missing(cls, path: str) -> Observation:
        return cls(path=path, exists=False)


@dataclass(frozen=True)
class FileStatus:
    """An observation plus what changed relative to the previous one."""

    observation: Observation
    changed: bool = False
    size_changed: bool = False
    content_changed: bool = False
    previous_size: int | None = None
    previous_mtime: int | None = None

    @property
    def path(self) -> str:
        return self.observation.path

    @property
    def size(self) -> int | None:
        return self.observation.size

    @property
    def mtime(self) -> int | None:
        return self.observation.mtime

    @property
    def hash(self) -> str | None:
        return self.observation.hash


class FileSnapshot(BaseModel):
    """The metadata of one side of a diff."""

    model_config = ConfigDict(frozen=True)

    size: int
    mtime: int
    hash: str | None = None


class FileDiff(BaseModel):
    """Why two files are considered different."""

    model_config = ConfigDict(frozen=True)

    reason: Literal["file-missing", "size", "content", "mtime"]
    which: Literal["first", "second"] | None = None
    first: FileSnapshot | None = None
    second: FileSnapshot | None = None

"""Filesystem primitives used by the manifest, detector and sync engine."""

from __future__ import annotations

import os
import shutil
import stat as stat_mod
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class FileStat:
    """The subset of ``os.stat_result`` wise cares about."""

    size: int
    mtime_ns: int
    atime_ns: int
    is_dir: bool
    is_file: bool

    @property
    def mtime_ms(self) -> int:
        return self.mtime_ns // 1_000_000


@dataclass(frozen=True)
class DirEntry:
    """One immediate child of a directory."""

    name: str
    is_dir: bool
    is_file: bool


@runtime_checkable
class FileSystem(Protocol):
    """Filesystem operations the core depends on."""

    def stat(self, path: str) -> FileStat: ...

    def read(self, path: str) -> bytes: ...

    def copy_bytes(self, src: str, dest: str) -> None: ...

    def set_times(self, path: str, atime_ns: int, mtime_ns: int) -> None: ...

    def mkdir_all(self, path: str) -> None: ...

    def list_entries(self, path: str) -> list[DirEntry]: ...


class LocalFileSystem:
    """FileSystem backed by the local disk via ``os`` and ``shutil``."""

    def stat(self, path: str) -> FileStat:
        st = os.stat(path)
        return FileStat(
            size=st.st_size,
            mtime_ns=st.st_mtime_ns,
            atime_ns=st.st_atime_ns,
            is_dir=stat_mod.S_ISDIR(st.st_mode),
            is_file=stat_mod.S_ISREG(st.st_mode),
        )

    def read(self, path: str) -> bytes:
        with open(path, "rb") as f:
            return f.read()

    def copy_bytes(self, src: str, dest: str) -> None:
        shutil.copyfile(src, dest)

    def set_times(self, path: str, atime_ns: int, mtime_ns: int) -> None:
        os.utime(path, ns=(atime_ns, mtime_ns))

    def mkdir_all(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)

    def list_entries(self, path: str) -> list[DirEntry]:
        # Symlinks are reported as neither dir nor file so callers skip them
        with os.scandir(path) as it:
            return [
                DirEntry(
                    name=entry.name,
                    is_dir=entry.is_dir(follow_symlinks=False),
                    is_file=entry.is_file(follow_symlinks=False),
                )
                for entry in it
            ]

"""Shared test fixtures for wise."""

from __future__ import annotations

import os
from collections import Counter
from pathlib import Path

import pytest

from wise.filesystem import LocalFileSystem
from wise.freshness import ChangeDetector, ObservationService
from wise.manifest import MaintenanceService, ManifestStore
from wise.sync import SyncEngine


class CountingFileSystem(LocalFileSystem):
    """LocalFileSystem that records every call, for asserting on I/O."""

    WRITES = ("copy_bytes", "set_times", "mkdir_all")

    def __init__(self) -> None:
        self.calls: Counter[str] = Counter()
        self.listed: list[str] = []
        self.copied: list[tuple[str, str]] = []

    @property
    def writes(self) -> int:
        return sum(self.calls[name] for name in self.WRITES)

    def reset(self) -> None:
        self.calls.clear()
        self.listed.clear()
        self.copied.clear()

    def stat(self, path):
        self.calls["stat"] += 1
        return super().stat(path)

    def read(self, path):
        self.calls["read"] += 1
        return super().read(path)

    def copy_bytes(self, src, dest):
        self.calls["copy_bytes"] += 1
        self.copied.append((src, dest))
        super().copy_bytes(src, dest)

    def set_times(self, path, atime_ns, mtime_ns):
        self.calls["set_times"] += 1
        super().set_times(path, atime_ns, mtime_ns)

    def mkdir_all(self, path):
        self.calls["mkdir_all"] += 1
        super().mkdir_all(path)

    def list_entries(self, path):
        self.calls["list_entries"] += 1
        self.listed.append(path)
        return super().list_entries(path)


def _write_file(path: Path, content: str, mtime: float | None = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def write_file():
    """Write content to a path (creating parents) and optionally pin its mtime."""
    return _write_file


@pytest.fixture
def store(tmp_path) -> ManifestStore:
    s = ManifestStore(tmp_path / ".temp" / "manifest.sqlite")
    yield s
    s.close()


@pytest.fixture
def fs() -> CountingFileSystem:
    return CountingFileSystem()


@pytest.fixture
def observer(store, fs) -> ObservationService:
    return ObservationService(store, fs=fs)


@pytest.fixture
def detector(observer) -> ChangeDetector:
    return ChangeDetector(observer)


@pytest.fixture
def engine(observer) -> SyncEngine:
    return SyncEngine(observer, max_workers=1)


@pytest.fixture
def maintenance(store) -> MaintenanceService:
    return MaintenanceService(store, retention_days=30)


@pytest.fixture
def work(tmp_path) -> Path:
    """Scratch directory for files under test, separate from the manifest."""
    d = tmp_path / "work"
    d.mkdir()
    return d

"""Wise: one object wiring the manifest, detector, sync engine and maintenance."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from wise.config.models import WiseConfig
from wise.filesystem import FileSystem
from wise.freshness.detector import ChangeDetector, PathLike
from wise.freshness.models import FileDiff, FileStatus, Observation
from wise.freshness.observer import ObservationService
from wise.manifest.maintenance import MaintenanceService
from wise.manifest.models import CleanResult, ManifestStats
from wise.manifest.store import ManifestStore
from wise.sync.engine import SyncEngine
from wise.sync.models import CopyResult


class Wise:
    """Shares one ManifestStore across every component.

    Build it once per process (``Wise.from_config``) and pass it around;
    the store is closed by ``close()`` or on leaving a ``with`` block.
    """

    def __init__(
        self,
        store: ManifestStore,
        fs: FileSystem | None = None,
        hash_algorithm: str = "sha256",
        max_workers: int = 4,
        retention_days: int = 30,
    ) -> None:
        self.store = store
        self.observer = ObservationService(store, fs=fs, algorithm=hash_algorithm)
        self.detector = ChangeDetector(self.observer)
        self.sync = SyncEngine(self.observer, max_workers=max_workers)
        self.maintenance = MaintenanceService(store, retention_days=retention_days)

    @classmethod
    def from_config(cls, config: WiseConfig, fs: FileSystem | None = None) -> Wise:
        return cls(
            ManifestStore(config.manifest.path),
            fs=fs,
            hash_algorithm=config.manifest.hash_algorithm,
            max_workers=config.sync.max_workers,
            retention_days=config.manifest.retention_days,
        )

    # Convenience delegates so callers can treat Wise as the whole API.

    def observe(self, path: PathLike, hash: bool = False) -> Observation:
        return self.observer.observe(path, hash=hash)

    def stat(self, path: PathLike, hash: bool = False) -> FileStatus:
        return self.observer.stat(path, hash=hash)

    def is_stale(
        self, target: PathLike, sources: PathLike | Iterable[PathLike], hash: bool = False
    ) -> bool:
        return self.detector.is_stale(target, sources, hash=hash)

    def is_fresh(
        self, target: PathLike, sources: PathLike | Iterable[PathLike], hash: bool = False
    ) -> bool:
        return self.detector.is_fresh(target, sources, hash=hash)

    def diff(self, first: PathLike, second: PathLike, hash: bool = False) -> FileDiff | None:
        return self.detector.diff(first, second, hash=hash)

    def copy(self, src: PathLike, dest: PathLike, **options: Any) -> CopyResult | list[CopyResult]:
        return self.sync.copy(src, dest, **options)

    def copy_file(self, src: PathLike, dest: PathLike, **options: Any) -> CopyResult:
        return self.sync.copy_file(src, dest, **options)

    def copy_directory(self, src: PathLike, dest: PathLike, **options: Any) -> list[CopyResult]:
        return self.sync.copy_directory(src, dest, **options)

    def clean_manifest(self, retention_days: int | None = None) -> CleanResult:
        return self.maintenance.clean_manifest(retention_days)

    def stats(self) -> ManifestStats:
        return self.maintenance.stats()

    def close(self) -> None:
        self.store.close()

    def __enter__(self) -> Wise:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

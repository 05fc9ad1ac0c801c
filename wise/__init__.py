"""wise: manifest-backed change detection and smart file copy."""

from wise.config import WiseConfig, load_config
from wise.core import Wise
from wise.errors import (
    CopyCancelledError,
    InvalidOperationError,
    SourceNotFoundError,
    WiseError,
)
from wise.filesystem import DirEntry, FileStat, FileSystem, LocalFileSystem
from wise.freshness import ChangeDetector, FileDiff, FileStatus, Observation, ObservationService
from wise.manifest import ManifestEntry, ManifestStats, ManifestStore, MaintenanceService
from wise.sync import CopyResult, SyncEngine, ignore_filter

__version__ = "0.1.0"

__all__ = [
    "ChangeDetector",
    "CopyCancelledError",
    "CopyResult",
    "DirEntry",
    "FileDiff",
    "FileStat",
    "FileStatus",
    "FileSystem",
    "InvalidOperationError",
    "LocalFileSystem",
    "MaintenanceService",
    "ManifestEntry",
    "ManifestStats",
    "ManifestStore",
    "Observation",
    "ObservationService",
    "SourceNotFoundError",
    "SyncEngine",
    "Wise",
    "WiseConfig",
    "WiseError",
    "ignore_filter",
    "load_config",
]

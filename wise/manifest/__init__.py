"""Persistent manifest of observed file metadata."""

from wise.manifest.maintenance import MaintenanceService
from wise.manifest.models import CleanResult, ManifestEntry, ManifestStats
from wise.manifest.store import ManifestStore

__all__ = [
    "CleanResult",
    "MaintenanceService",
    "ManifestEntry",
    "ManifestStats",
    "ManifestStore",
]

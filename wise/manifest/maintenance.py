"""Housekeeping for the manifest: retention cleanup and statistics."""

from __future__ import annotations

import logging
import time

from wise.manifest.models import CleanResult, ManifestStats
from wise.manifest.store import ManifestStore

logger = logging.getLogger(__name__)

_DAY_MS = 24 * 60 * 60 * 1000


class MaintenanceService:
    def __init__(self, store: ManifestStore, retention_days: int = 30) -> None:
        self.store = store
        self.retention_days = retention_days

    def clean_manifest(self, retention_days: int | None = None) -> CleanResult:
        """Delete rows not observed within the last *retention_days* days."""
        days = self.retention_days if retention_days is None else retention_days
        if days < 0:
            raise ValueError(f"retention_days must be >= 0, got {days}")
        threshold = int(time.time() * 1000) - days * _DAY_MS
        deleted = self.store.delete_older_than(threshold)
        logger.info("Removed %d manifest entries older than %d day(s)", deleted, days)
        return CleanResult(deleted=deleted)

    def stats(self) -> ManifestStats:
        return self.store.aggregate()

"""Freshness tracking: manifest observation, staleness and diff checks."""

from wise.freshness.detector import ChangeDetector
from wise.freshness.models import FileDiff, FileSnapshot, FileStatus, Observation
from wise.freshness.observer import ObservationService

__all__ = [
    "ChangeDetector",
    "FileDiff",
    "FileSnapshot",
    "FileStatus",
    "Observation",
    "ObservationService",
]

"""Smart copy of files and directory trees."""

from wise.sync.engine import PathFilter, SyncEngine
from wise.sync.filters import ignore_filter
from wise.sync.models import CopyResult

__all__ = ["CopyResult", "PathFilter", "SyncEngine", "ignore_filter"]

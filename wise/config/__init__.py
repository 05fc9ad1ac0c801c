from .loader import load_config
from .models import ManifestConfig, SyncConfig, WiseConfig

__all__ = [
    "ManifestConfig",
    "SyncConfig",
    "WiseConfig",
    "load_config",
]

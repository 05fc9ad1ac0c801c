"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import WiseConfig


def load_config(cli_path: str | None = None) -> WiseConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults.

    An empty file does not count as a config; the search moves on to the
    next location.
    """
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./wise.yaml"),
        Path.home() / ".wise" / "config.yaml",
    ]

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                raw = _expand_env_vars(raw)
                return WiseConfig(**raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ValueError(f"Invalid config in {path}: {e}") from e

    return WiseConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings. Unset variables expand to ""."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `wise config init`
DEFAULT_CONFIG_TEMPLATE = """\
# wise.yaml

# Manifest (SQLite cache of observed file metadata; safe to delete)
manifest:
  path: ".temp/.wise.sqlite"
  retention_days: 30           # `wise manifest clean` drops rows unseen this long
  hash_algorithm: "sha256"

# Smart copy defaults
sync:
  hash: false                  # compare content digests, not just size/mtime
  preserve_timestamps: true
  max_workers: 4
  # ignore_patterns: [".git", "*.tmp"]

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""

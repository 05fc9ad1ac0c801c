import hashlib
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ManifestConfig(BaseModel):
    path: str = ".temp/.wise.sqlite"
    retention_days: int = Field(default=30, gt=0)
    hash_algorithm: str = "sha256"

    @field_validator("hash_algorithm")
    @classmethod
    def _known_algorithm(cls, value: str) -> str:
        if value not in hashlib.algorithms_available:
            raise ValueError(f"unknown hash algorithm: {value}")
        return value


class SyncConfig(BaseModel):
    hash: bool = False
    preserve_timestamps: bool = True
    max_workers: int = Field(default=4, gt=0)
    ignore_patterns: list[str] = Field(default_factory=list)


class WiseConfig(BaseModel):
    manifest: ManifestConfig = Field(default_factory=ManifestConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"

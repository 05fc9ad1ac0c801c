from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class CopyResult(BaseModel):
    """Outcome of copying one file."""

    model_config = ConfigDict(frozen=True)

    src: str
    dest: str
    copied: bool
    reason: Literal["up-to-date"] | None = None

"""Shared type aliases and small typing helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from msgspec import Meta

type PathLike = str | Path

NonEmptyStr = Annotated[str, Meta(min_length=1)]


__all__ = [
    "NonEmptyStr",
    "PathLike",
]

"""Cache entry and statistics models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


class CacheEntry(BaseModel):
    """A rendered output stored on disk under its content hash."""

    key: str
    ext: str
    tag: str = ""
    path: Path
    size_bytes: int = 0
    modified_at: float = 0.0


class CacheStats(BaseModel):
    """Aggregate cache statistics."""

    entries: int = 0
    size_mb: float = 0.0
    hits: int = 0
    misses: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

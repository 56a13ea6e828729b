"""Shared Pydantic models for rmd2html."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field

# ── Enums ──


class RendererKind(StrEnum):
    AUTO = "auto"
    MARKDOWN = "markdown"
    KNITR = "knitr"
    RMARKDOWN = "rmarkdown"
    COMMAND = "command"


# ── Runtime models ──


class StageResult(BaseModel):
    name: str
    key: str | None = None
    cached: bool = False


class RenderResult(BaseModel):
    source_path: Path
    content_hash: str = ""
    cache_path: Path | None = None
    output: str = ""
    cached: bool = False
    steps: list[StageResult] = Field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def save(self, path: str | Path) -> Path:
        """Write the rendered output to a file, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(self.output)
        return path

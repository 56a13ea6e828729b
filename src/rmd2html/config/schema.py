"""Pydantic model for the merged render configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from rmd2html.config.hierarchy import load_config_hierarchy
from rmd2html.errors.exceptions import ConfigError
from rmd2html.types import RendererKind


class RenderSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    cache_dir: Path = Path("_cache")
    cache_disabled: bool = False
    renderer: RendererKind = RendererKind.AUTO
    command: list[str] | str | None = None
    output_ext: str = ".html"
    pandoc_path: str = "pandoc"
    rscript_path: str = "Rscript"
    from_format: str = "markdown"
    to_format: str = "html"
    fix_links: bool = True
    render_timeout: float | None = Field(default=None, gt=0)
    max_workers: int = Field(default=4, ge=1)
    log_level: str = "WARNING"

    @field_validator("cache_dir")
    @classmethod
    def _absolute_cache_dir(cls, v: Path) -> Path:
        return v.expanduser().absolute()

    @field_validator("output_ext")
    @classmethod
    def _dotted_ext(cls, v: str) -> str:
        if not v:
            raise ValueError("output_ext must not be empty")
        return v if v.startswith(".") else f".{v}"

    @model_validator(mode="after")
    def _command_has_args(self) -> RenderSettings:
        if self.renderer == RendererKind.COMMAND and not self.command:
            raise ValueError("renderer 'command' needs a command to run")
        return self


def load_settings(**runtime_overrides: Any) -> RenderSettings:
    """Merge all configuration layers and validate the result."""
    config = load_config_hierarchy(**runtime_overrides)
    try:
        return RenderSettings(**config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

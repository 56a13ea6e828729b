"""rmd2html — render book chapters to HTML through a content-addressed cache."""

from rmd2html.cache.store import RenderCache
from rmd2html.core import Rmd2Html, render, render_batch, select_sources
from rmd2html.errors.exceptions import (
    CacheError,
    MissingInputError,
    RenderError,
    Rmd2HtmlError,
    UnreadableInputError,
)
from rmd2html.render.base import FunctionRenderer, Renderer
from rmd2html.types import RenderResult

__all__ = [
    "Rmd2Html",
    "RenderCache",
    "RenderResult",
    "Renderer",
    "FunctionRenderer",
    "Rmd2HtmlError",
    "MissingInputError",
    "UnreadableInputError",
    "RenderError",
    "CacheError",
    "render",
    "render_batch",
    "select_sources",
]

"""Renderers — the swappable render step behind the cache."""

from rmd2html.render.base import FunctionRenderer, Renderer
from rmd2html.render.command import CommandRenderer, PandocRenderer
from rmd2html.render.knitr import KnitrRenderer
from rmd2html.render.process import run_command

__all__ = [
    "Renderer",
    "FunctionRenderer",
    "CommandRenderer",
    "PandocRenderer",
    "KnitrRenderer",
    "run_command",
]

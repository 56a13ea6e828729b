"""Error handling — exception hierarchy for input and render failures."""

from rmd2html.errors.exceptions import (
    CacheError,
    ConfigError,
    InputError,
    MissingInputError,
    RenderError,
    Rmd2HtmlError,
    UnreadableInputError,
)

__all__ = [
    "Rmd2HtmlError",
    "InputError",
    "MissingInputError",
    "UnreadableInputError",
    "RenderError",
    "ConfigError",
    "CacheError",
]

"""Custom exception hierarchy for rmd2html."""

from __future__ import annotations

from pathlib import Path
from typing import Any


class Rmd2HtmlError(Exception):
    """Base exception for all rmd2html errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class InputError(Rmd2HtmlError):
    """The source document cannot be used for this invocation."""

    def __init__(self, message: str = "", path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class MissingInputError(InputError):
    """Source path does not exist."""


class UnreadableInputError(InputError):
    """Source path exists but cannot be read or decoded.

    Examples: no read permission, a directory, invalid UTF-8.
    """


class RenderError(Rmd2HtmlError):
    """The external render step failed. Nothing is cached for it."""

    def __init__(
        self,
        message: str = "",
        command: list[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class ConfigError(Rmd2HtmlError):
    """Merged configuration failed validation."""


class CacheError(Rmd2HtmlError):
    """A cache entry exists but cannot be served."""

    def __init__(self, message: str = "", path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None

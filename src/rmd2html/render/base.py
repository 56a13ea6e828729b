"""Renderer interface: source text in, rendered text out."""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from rmd2html.errors.exceptions import RenderError


class Renderer(ABC):
    """A render step. Implementations raise RenderError on failure."""

    name: str = "renderer"

    @abstractmethod
    async def render(self, source: str) -> str:
        """Render ``source`` and return the full output text."""

    @property
    def cache_tag(self) -> str:
        """Names this renderer's cache entries. Renderers that differ must differ here."""
        return self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class FunctionRenderer(Renderer):
    """Adapts a plain sync or async callable to the Renderer interface."""

    def __init__(
        self,
        fn: Callable[[str], str] | Callable[[str], Awaitable[str]],
        name: str | None = None,
    ) -> None:
        self._fn = fn
        self.name = name or getattr(fn, "__name__", "function")

    async def render(self, source: str) -> str:
        try:
            result = self._fn(source)
            if inspect.isawaitable(result):
                result = await result
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"{self.name} failed: {e}") from e
        if not isinstance(result, str):
            raise RenderError(
                f"{self.name} returned {type(result).__name__}, expected str"
            )
        return result

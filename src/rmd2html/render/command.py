"""Renderers that pipe the source through an external command."""

from __future__ import annotations

import shlex
from collections.abc import Sequence
from pathlib import Path

from rmd2html.cache.keys import hash_text
from rmd2html.render.base import Renderer
from rmd2html.render.process import run_command


class CommandRenderer(Renderer):
    """Source on stdin, rendered output on stdout."""

    def __init__(
        self,
        args: Sequence[str] | str,
        cwd: str | Path | None = None,
        timeout: float | None = None,
        name: str | None = None,
    ) -> None:
        self._args = shlex.split(args) if isinstance(args, str) else list(args)
        if not self._args:
            raise ValueError("CommandRenderer needs a non-empty command")
        self._cwd = cwd
        self._timeout = timeout
        self.name = name or Path(self._args[0]).name

    @property
    def args(self) -> list[str]:
        return list(self._args)

    @property
    def cache_tag(self) -> str:
        # Any change to the argv, such as output format or filters, is a new namespace
        return f"{self.name}-{hash_text(shlex.join(self._args))[:8]}"

    async def render(self, source: str) -> str:
        return await run_command(
            self._args, source, cwd=self._cwd, timeout=self._timeout
        )


class PandocRenderer(CommandRenderer):
    """Markdown to HTML with pandoc."""

    def __init__(
        self,
        executable: str = "pandoc",
        from_format: str = "markdown",
        to_format: str = "html",
        extra_args: Sequence[str] = (),
        timeout: float | None = None,
    ) -> None:
        args = [executable, "-f", from_format, "-t", to_format, *extra_args]
        super().__init__(args, timeout=timeout, name="pandoc")

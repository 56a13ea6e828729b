"""Top-level entry points: render(), render_batch(), Rmd2Html."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Sequence
from pathlib import Path

from rmd2html.cache.store import RenderCache
from rmd2html.config.schema import RenderSettings
from rmd2html.errors.exceptions import Rmd2HtmlError
from rmd2html.pipeline.builtin import build_pipeline, chapter_files
from rmd2html.pipeline.engine import RenderPipeline
from rmd2html.render.base import Renderer
from rmd2html.source import read_source
from rmd2html.types import RendererKind, RenderResult

logger = logging.getLogger(__name__)


class Rmd2Html:
    """Renders source documents through a content-addressed cache."""

    def __init__(
        self,
        cache_dir: str | Path,
        renderer: RendererKind | str | Renderer = RendererKind.AUTO,
        command: list[str] | str | None = None,
        output_ext: str = ".html",
        pandoc_path: str = "pandoc",
        rscript_path: str = "Rscript",
        from_format: str = "markdown",
        to_format: str = "html",
        fix_links: bool = True,
        timeout: float | None = None,
        no_cache: bool = False,
    ) -> None:
        if isinstance(renderer, Renderer):
            self._custom_renderer: Renderer | None = renderer
            self._kind = RendererKind.AUTO
        else:
            self._custom_renderer = None
            self._kind = RendererKind(renderer)
        self._command = command
        self._output_ext = output_ext
        self._pandoc_path = pandoc_path
        self._rscript_path = rscript_path
        self._from_format = from_format
        self._to_format = to_format
        self._fix_links = fix_links
        self._timeout = timeout
        self._cache = RenderCache(cache_dir, enabled=not no_cache)

    @classmethod
    def from_settings(cls, settings: RenderSettings) -> Rmd2Html:
        return cls(
            cache_dir=settings.cache_dir,
            renderer=settings.renderer,
            command=settings.command,
            output_ext=settings.output_ext,
            pandoc_path=settings.pandoc_path,
            rscript_path=settings.rscript_path,
            from_format=settings.from_format,
            to_format=settings.to_format,
            fix_links=settings.fix_links,
            timeout=settings.render_timeout,
            no_cache=settings.cache_disabled,
        )

    @property
    def cache(self) -> RenderCache:
        return self._cache

    def pipeline_for(
        self,
        source_path: Path,
        renderer: RendererKind | str | Renderer | None = None,
    ) -> RenderPipeline:
        """Pipeline for ``source_path``; ``renderer`` overrides the default for one call."""
        kind, custom = self._kind, self._custom_renderer
        if isinstance(renderer, Renderer):
            kind, custom = RendererKind.AUTO, renderer
        elif renderer is not None:
            kind, custom = RendererKind(renderer), None
        return build_pipeline(
            kind,
            source_path,
            command=self._command,
            renderer=custom,
            output_ext=self._output_ext,
            pandoc_path=self._pandoc_path,
            rscript_path=self._rscript_path,
            from_format=self._from_format,
            to_format=self._to_format,
            fix_links=self._fix_links,
            timeout=self._timeout,
        )

    async def render_async(
        self,
        input_path: str | Path,
        renderer: RendererKind | str | Renderer | None = None,
    ) -> RenderResult:
        """Render one document. Raises InputError or RenderError on failure."""
        input_path = Path(input_path)
        source = read_source(input_path)
        pipeline = self.pipeline_for(input_path, renderer)
        logger.info("Rendering %s with the %s pipeline", input_path, pipeline.name)

        outcome = await pipeline.run(source, self._cache)
        return RenderResult(
            source_path=input_path,
            content_hash=outcome.content_hash,
            cache_path=outcome.cache_path,
            output=outcome.output,
            cached=outcome.cached,
            steps=outcome.steps,
        )

    async def render_batch_async(
        self,
        input_paths: Sequence[str | Path],
        max_workers: int = 4,
    ) -> list[RenderResult]:
        """Render many documents concurrently, one result per input, in order.

        A failing document gets a result with ``error`` set; the rest carry on.
        """
        semaphore = asyncio.Semaphore(max_workers)

        async def worker(path: str | Path) -> RenderResult:
            async with semaphore:
                return await self.render_async(path)

        results = await asyncio.gather(
            *(worker(p) for p in input_paths), return_exceptions=True
        )

        final: list[RenderResult] = []
        for path, result in zip(input_paths, results, strict=True):
            if isinstance(result, Rmd2HtmlError):
                logger.error("Rendering %s failed: %s", path, result)
                final.append(RenderResult(source_path=Path(path), error=str(result)))
            elif isinstance(result, BaseException):
                raise result
            else:
                final.append(result)
        return final


def select_sources(directory: str | Path, start: str | None = None) -> list[Path]:
    """Chapter sources in ``directory``, optionally resuming at ``start``.

    ``start`` is a regular expression; rendering begins at the first file
    whose name matches it. With no match every file is kept.
    """
    files = chapter_files(Path(directory))
    if start:
        pattern = re.compile(start)
        for i, path in enumerate(files):
            if pattern.search(path.name):
                return files[i:]
        logger.warning("No file matches %r, rendering all %d files", start, len(files))
    return files


# ── Module-level convenience functions ──


def render(
    input_path: str | Path,
    cache_dir: str | Path,
    renderer: RendererKind | str | Renderer = RendererKind.AUTO,
    no_cache: bool = False,
    **kwargs: object,
) -> RenderResult:
    """Render a document (sync wrapper)."""
    converter = Rmd2Html(cache_dir, renderer=renderer, no_cache=no_cache, **kwargs)  # type: ignore[arg-type]
    return asyncio.run(converter.render_async(input_path))


def render_batch(
    input_paths: Sequence[str | Path],
    cache_dir: str | Path,
    renderer: RendererKind | str | Renderer = RendererKind.AUTO,
    max_workers: int = 4,
    no_cache: bool = False,
    **kwargs: object,
) -> list[RenderResult]:
    """Render multiple documents concurrently (sync wrapper)."""
    converter = Rmd2Html(cache_dir, renderer=renderer, no_cache=no_cache, **kwargs)  # type: ignore[arg-type]
    return asyncio.run(converter.render_batch_async(input_paths, max_workers=max_workers))

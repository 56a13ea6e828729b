"""Built-in pipelines and the suffix-based choice between them."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from rmd2html.errors.exceptions import ConfigError
from rmd2html.pipeline.engine import RenderPipeline, Stage
from rmd2html.render.base import Renderer
from rmd2html.render.command import CommandRenderer, PandocRenderer
from rmd2html.render.knitr import KnitrRenderer
from rmd2html.transforms.links import LinkRewriter, build_link_index
from rmd2html.types import RendererKind

RMARKDOWN_SUFFIXES = frozenset({".rmd", ".rmarkdown"})
CHAPTER_SUFFIXES = RMARKDOWN_SUFFIXES | {".md"}


def resolve_kind(kind: RendererKind | str, source_path: Path) -> RendererKind:
    """Map ``auto`` to a concrete pipeline by the source file's suffix."""
    kind = RendererKind(kind)
    if kind != RendererKind.AUTO:
        return kind
    if source_path.suffix.lower() in RMARKDOWN_SUFFIXES:
        return RendererKind.RMARKDOWN
    return RendererKind.MARKDOWN


def build_pipeline(
    kind: RendererKind | str,
    source_path: Path,
    *,
    command: list[str] | str | None = None,
    renderer: Renderer | None = None,
    output_ext: str = ".html",
    pandoc_path: str = "pandoc",
    rscript_path: str = "Rscript",
    from_format: str = "markdown",
    to_format: str = "html",
    fix_links: bool = True,
    link_sources: Iterable[Path] | None = None,
    timeout: float | None = None,
) -> RenderPipeline:
    """Assemble the stages for one source document.

    ``renderer`` overrides everything else with a single cached stage.
    """
    if renderer is not None:
        return RenderPipeline(renderer.name, [Stage(renderer.name, renderer, output_ext)])

    kind = resolve_kind(kind, source_path)
    pandoc = PandocRenderer(
        executable=pandoc_path,
        from_format=from_format,
        to_format=to_format,
        timeout=timeout,
    )
    knitr = KnitrRenderer(
        rscript=rscript_path,
        work_dir=source_path.parent,
        timeout=timeout,
    )

    if kind == RendererKind.MARKDOWN:
        return RenderPipeline(kind.value, [Stage("pandoc", pandoc, output_ext)])

    if kind == RendererKind.KNITR:
        return RenderPipeline(kind.value, [Stage("knitr", knitr, ".md")])

    if kind == RendererKind.COMMAND:
        if not command:
            raise ConfigError("The command renderer needs a command to run")
        runner = CommandRenderer(command, cwd=source_path.parent, timeout=timeout)
        return RenderPipeline(kind.value, [Stage(runner.name, runner, output_ext)])

    # rmarkdown: knit, qualify cross-chapter links, then pandoc
    stages = [Stage("knitr", knitr, ".md")]
    if fix_links:
        sources = link_sources if link_sources is not None else chapter_files(source_path.parent)
        stages.append(Stage("links", LinkRewriter(build_link_index(sources, output_ext))))
    stages.append(Stage("pandoc", pandoc, output_ext))
    return RenderPipeline(kind.value, stages)


def chapter_files(directory: Path) -> list[Path]:
    """Chapter sources in ``directory``, sorted by name."""
    return sorted(
        p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in CHAPTER_SUFFIXES
    )

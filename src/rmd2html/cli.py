"""Click CLI for rmd2html — render chapters through the render cache."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from rmd2html.config.schema import RenderSettings, load_settings
from rmd2html.errors.exceptions import Rmd2HtmlError
from rmd2html.types import RendererKind, RenderResult

console = Console()
error_console = Console(stderr=True)

_RENDERER_CHOICES = [kind.value for kind in RendererKind]


def _setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _fail(message: object) -> NoReturn:
    error_console.print(f"[red]Error:[/red] {escape(str(message))}")
    sys.exit(1)


def _settings(
    cache_dir: str | None = None,
    no_cache: bool = False,
    renderer: str | None = None,
    command: str | None = None,
    no_fix_links: bool = False,
    workers: int | None = None,
) -> RenderSettings:
    if command and renderer is None:
        renderer = RendererKind.COMMAND.value
    try:
        return load_settings(
            cache_dir=cache_dir,
            cache_disabled=no_cache or None,
            renderer=renderer,
            command=command,
            fix_links=False if no_fix_links else None,
            max_workers=workers,
        )
    except Rmd2HtmlError as e:
        _fail(e)


def _output_ext(settings: RenderSettings, source_path: Path) -> str:
    from rmd2html.pipeline.builtin import resolve_kind

    if resolve_kind(settings.renderer, source_path) == RendererKind.KNITR:
        return ".md"
    return settings.output_ext


_cache_dir_option = click.option(
    "--cache-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Cache directory (default: _cache).",
)
_renderer_option = click.option(
    "--renderer",
    type=click.Choice(_RENDERER_CHOICES),
    default=None,
    help="Render pipeline; 'auto' picks by file suffix.",
)
_command_option = click.option(
    "--command",
    type=str,
    default=None,
    help="Command that reads the source on stdin and writes the output on stdout.",
)
_renderer_options = [
    _renderer_option,
    _command_option,
    click.option("--no-cache", is_flag=True, default=False, help="Disable caching."),
    click.option(
        "--no-fix-links",
        is_flag=True,
        default=False,
        help="Leave internal (#id) links as they are.",
    ),
    _cache_dir_option,
    click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)."),
]


def _with_renderer_options(fn):  # type: ignore[no-untyped-def]
    for option in reversed(_renderer_options):
        fn = option(fn)
    return fn


@click.group()
@click.version_option(package_name="rmd2html")
def cli() -> None:
    """rmd2html — render book chapters to HTML with a content-addressed cache."""


@cli.command("render")
@click.argument("input_path", type=click.Path())
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Output file path.")
@_with_renderer_options
def render_cmd(
    input_path: str,
    output: str | None,
    renderer: str | None,
    command: str | None,
    no_cache: bool,
    no_fix_links: bool,
    cache_dir: str | None,
    verbose: int,
) -> None:
    """Render one document and print the result."""
    from rmd2html.core import Rmd2Html

    _setup_logging(verbose)
    settings = _settings(cache_dir, no_cache, renderer, command, no_fix_links)
    converter = Rmd2Html.from_settings(settings)

    try:
        result = asyncio.run(converter.render_async(input_path))
    except Rmd2HtmlError as e:
        _fail(e)

    if output:
        written = result.save(output)
        console.print(f"[green]Written to {escape(str(written))}[/green]")
    else:
        click.echo(result.output, nl=False)

    if verbose >= 1:
        _print_summary(result)


@cli.command("render-all")
@click.argument("input_dir", type=click.Path(exists=True, file_okay=False))
@click.option("--output-dir", type=click.Path(file_okay=False), help="Where to write outputs.")
@click.option("--start", type=str, default=None, help="Begin at the first file matching this regex.")
@click.option("--workers", type=int, default=None, help="Concurrent renders.")
@_with_renderer_options
def render_all_cmd(
    input_dir: str,
    output_dir: str | None,
    start: str | None,
    workers: int | None,
    renderer: str | None,
    command: str | None,
    no_cache: bool,
    no_fix_links: bool,
    cache_dir: str | None,
    verbose: int,
) -> None:
    """Render every chapter source in a directory."""
    from rmd2html.core import Rmd2Html, select_sources

    _setup_logging(verbose)
    settings = _settings(cache_dir, no_cache, renderer, command, no_fix_links, workers)

    files = select_sources(input_dir, start)
    if not files:
        error_console.print("[yellow]No chapter sources found in directory.[/yellow]")
        return

    targets: dict[str, Path] = {}
    for path in files:
        name = f"{path.stem}{_output_ext(settings, path)}"
        # Compared case-insensitively so ch.Rmd and CH.md also clash
        if name.lower() in targets:
            _fail(f"{targets[name.lower()].name} and {path.name} would both write {name}")
        targets[name.lower()] = path

    out_dir = Path(output_dir) if output_dir else Path(input_dir) / "_site"
    converter = Rmd2Html.from_settings(settings)
    results = asyncio.run(converter.render_batch_async(files, max_workers=settings.max_workers))

    failed = 0
    for result in results:
        if not result.ok:
            failed += 1
            error_console.print(
                f"[red]Failed:[/red] {escape(str(result.source_path))}: {escape(result.error or '')}"
            )
            continue
        target = out_dir / f"{result.source_path.stem}{_output_ext(settings, result.source_path)}"
        result.save(target)
        if verbose >= 1:
            state = "cached" if result.cached else "rendered"
            error_console.print(
                f"{escape(str(result.source_path))} → {escape(str(target))} ({state})"
            )

    console.print(
        f"[green]Rendered {len(results) - failed} of {len(results)} files"
        f" to {escape(str(out_dir))}[/green]"
    )
    if failed:
        sys.exit(1)


def _print_summary(result: RenderResult) -> None:
    """Print a render summary."""
    error_console.print()
    table = Table(title="Render Summary", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Source", escape(str(result.source_path)))
    table.add_row("Content hash", result.content_hash)
    table.add_row("Cache file", escape(str(result.cache_path)) if result.cache_path else "-")
    table.add_row("Served from cache", "yes" if result.cached else "no")
    error_console.print(table)

    if result.steps:
        step_table = Table(title="Stages", show_header=True)
        step_table.add_column("Stage")
        step_table.add_column("Key")
        step_table.add_column("Cached")
        for step in result.steps:
            step_table.add_row(
                step.name,
                step.key[:12] if step.key else "-",
                "yes" if step.cached else "no",
            )
        error_console.print(step_table)


@cli.group()
def cache() -> None:
    """Cache management commands."""


@cache.command("stats")
@_cache_dir_option
def cache_stats(cache_dir: str | None) -> None:
    """Show cache statistics."""
    from rmd2html.cache.store import RenderCache

    settings = _settings(cache_dir)
    store = RenderCache(settings.cache_dir)

    table = Table(title="Cache Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    stats = store.stats()
    table.add_row("Directory", escape(str(store.cache_dir)))
    table.add_row("Entries", str(stats.entries))
    table.add_row("Size (MB)", f"{stats.size_mb:.1f}")

    by_ext: dict[str, int] = {}
    for entry in store.entries():
        by_ext[entry.ext or "(none)"] = by_ext.get(entry.ext or "(none)", 0) + 1
    for ext, count in sorted(by_ext.items()):
        table.add_row(f"  {ext}", str(count))

    console.print(table)


@cache.command("clear")
@_cache_dir_option
@click.option("--ext", type=str, default=None, help="Only remove entries with this extension.")
@click.confirmation_option(prompt="Are you sure you want to clear the cache?")
def cache_clear(cache_dir: str | None, ext: str | None) -> None:
    """Clear cached outputs."""
    from rmd2html.cache.store import RenderCache

    settings = _settings(cache_dir)
    removed = RenderCache(settings.cache_dir).clear(ext)
    console.print(f"[green]Cache cleared ({removed} entries removed).[/green]")


@cache.command("path")
@click.argument("input_path", type=click.Path())
@_cache_dir_option
@_renderer_option
@_command_option
@click.option("--ext", type=str, default=None, help="Entry extension (default: first stage's).")
def cache_path(
    input_path: str,
    cache_dir: str | None,
    renderer: str | None,
    command: str | None,
    ext: str | None,
) -> None:
    """Show where the first render stage of a file is cached."""
    from rmd2html.cache.keys import hash_text
    from rmd2html.core import Rmd2Html
    from rmd2html.source import read_source

    settings = _settings(cache_dir, renderer=renderer, command=command)
    converter = Rmd2Html.from_settings(settings)
    try:
        key = hash_text(read_source(input_path))
        first = converter.pipeline_for(Path(input_path)).stages[0]
    except Rmd2HtmlError as e:
        _fail(e)

    path = converter.cache.path_for(key, ext or first.ext or "", first.renderer.cache_tag)
    state = "present" if path.is_file() else "absent"
    click.echo(f"{path}\t{state}")


def main() -> None:
    """Entry point for the CLI."""
    cli()

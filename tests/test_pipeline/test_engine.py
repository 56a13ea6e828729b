"""Tests for running documents through render stages."""

import pytest

from rmd2html.cache.keys import hash_text
from rmd2html.cache.store import RenderCache
from rmd2html.errors.exceptions import RenderError
from rmd2html.pipeline.engine import RenderPipeline, Stage
from rmd2html.render.base import FunctionRenderer


class TestRenderPipeline:
    def test_needs_stages(self):
        with pytest.raises(ValueError):
            RenderPipeline("empty", [])

    async def test_single_cached_stage(self, cache_dir, upper_renderer):
        pipeline = RenderPipeline("one", [Stage("upper", upper_renderer, ".html")])
        outcome = await pipeline.run("hello", RenderCache(cache_dir))

        assert outcome.output == "HELLO"
        assert outcome.content_hash == hash_text("hello")
        assert outcome.cache_path == cache_dir / f"{hash_text('hello')}.upper.html"
        assert outcome.cache_path.read_text() == "HELLO"
        assert outcome.cached is False
        assert [s.name for s in outcome.steps] == ["upper"]

    async def test_stages_chain_and_cache_independently(self, cache_dir, upper_renderer):
        suffix_calls = []

        def add_suffix(text: str) -> str:
            suffix_calls.append(text)
            return text + "!"

        wrap = FunctionRenderer(lambda text: f"<p>{text}</p>", name="wrap")
        pipeline = RenderPipeline(
            "chain",
            [
                Stage("upper", upper_renderer, ".md"),
                Stage("suffix", FunctionRenderer(add_suffix, name="suffix")),
                Stage("wrap", wrap, ".html"),
            ],
        )
        cache = RenderCache(cache_dir)

        first = await pipeline.run("hello", cache)
        second = await pipeline.run("hello", cache)

        assert first.output == second.output == "<p>HELLO!</p>"
        assert [s.cached for s in first.steps] == [False, False, False]
        assert [s.cached for s in second.steps] == [True, False, True]
        assert second.cached is True
        assert len(upper_renderer.calls) == 1
        assert len(suffix_calls) == 2  # uncached stage runs every time
        assert first.steps[0].key == hash_text("hello")
        assert first.steps[2].key == hash_text("HELLO!")
        assert first.steps[1].key is None

    async def test_uncached_last_stage(self, cache_dir, upper_renderer):
        pipeline = RenderPipeline(
            "tail",
            [
                Stage("upper", upper_renderer, ".md"),
                Stage("noop", FunctionRenderer(lambda t: t, name="noop")),
            ],
        )
        outcome = await pipeline.run("x", RenderCache(cache_dir))
        assert outcome.cache_path is None
        assert outcome.cached is False

    async def test_failing_stage_stops_pipeline(self, cache_dir, failing_renderer, upper_renderer):
        pipeline = RenderPipeline(
            "broken",
            [
                Stage("upper", upper_renderer, ".md"),
                Stage("fail", failing_renderer, ".html"),
            ],
        )
        cache = RenderCache(cache_dir)
        with pytest.raises(RenderError):
            await pipeline.run("hello", cache)
        # First stage output is complete and stays cached; the failed stage left nothing
        assert [e.ext for e in cache.entries()] == [".md"]

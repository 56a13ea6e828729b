"""Run a document through its render stages in order."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from rmd2html.cache.keys import hash_text
from rmd2html.cache.store import RenderCache
from rmd2html.render.base import Renderer
from rmd2html.types import StageResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stage:
    """One render step. ``ext=None`` means the stage output is not cached."""

    name: str
    renderer: Renderer
    ext: str | None = None

    @property
    def cached(self) -> bool:
        return self.ext is not None


@dataclass
class PipelineOutcome:
    output: str
    content_hash: str
    cache_path: Path | None = None
    cached: bool = False
    steps: list[StageResult] = field(default_factory=list)


class RenderPipeline:
    """Ordered stages; each cached stage is keyed on the text it receives."""

    def __init__(self, name: str, stages: list[Stage]) -> None:
        if not stages:
            raise ValueError(f"Pipeline '{name}' has no stages")
        self.name = name
        self._stages = list(stages)

    @property
    def stages(self) -> list[Stage]:
        return list(self._stages)

    async def run(self, source: str, cache: RenderCache) -> PipelineOutcome:
        content_hash = hash_text(source)
        text = source
        steps: list[StageResult] = []
        last_path: Path | None = None
        last_cached = False

        for stage in self._stages:
            if stage.cached:
                result = await cache.get_or_render(text, stage.renderer, stage.ext or "")
                text = result.output
                last_path = result.path
                last_cached = result.cached
                steps.append(StageResult(name=stage.name, key=result.key, cached=result.cached))
            else:
                text = await stage.renderer.render(text)
                last_path = None
                last_cached = False
                steps.append(StageResult(name=stage.name))
            logger.debug("Stage %s/%s done", self.name, stage.name)

        return PipelineOutcome(
            output=text,
            content_hash=content_hash,
            cache_path=last_path,
            cached=last_cached,
            steps=steps,
        )

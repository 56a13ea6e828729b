"""Render pipelines — ordered stages, each optionally behind the cache."""

from rmd2html.pipeline.builtin import build_pipeline, resolve_kind
from rmd2html.pipeline.engine import PipelineOutcome, RenderPipeline, Stage

__all__ = [
    "RenderPipeline",
    "PipelineOutcome",
    "Stage",
    "build_pipeline",
    "resolve_kind",
]

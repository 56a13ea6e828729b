import asyncio
import shlex
import sys

import pytest

from rmd2html.errors.exceptions import RenderError
from rmd2html.render.base import Renderer

UPPER_SCRIPT = "import sys; sys.stdout.write(sys.stdin.read().upper())"


class CountingRenderer(Renderer):
    """Upper-cases its input and records every call."""

    name = "upper"

    def __init__(self, fail: bool = False, delay: float = 0.0) -> None:
        self.calls: list[str] = []
        self.fail = fail
        self.delay = delay

    async def render(self, source: str) -> str:
        self.calls.append(source)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RenderError("stub renderer failed")
        return source.upper()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user/global config, env vars and cwd out of every test."""
    import os

    for key in list(os.environ):
        if key.startswith("RMD2HTML_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(
        "rmd2html.config.hierarchy._GLOBAL_CONFIG_PATH", tmp_path / "global-config.yaml"
    )
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def upper_renderer():
    return CountingRenderer()


@pytest.fixture
def failing_renderer():
    return CountingRenderer(fail=True)


@pytest.fixture
def slow_renderer():
    return CountingRenderer(delay=0.05)


@pytest.fixture
def upper_args():
    """A real command that upper-cases stdin."""
    return [sys.executable, "-c", UPPER_SCRIPT]


@pytest.fixture
def upper_command(upper_args):
    return shlex.join(upper_args)

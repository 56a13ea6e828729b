"""R Markdown to markdown with knitr, run through Rscript."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from rmd2html.errors.exceptions import RenderError
from rmd2html.render.base import Renderer
from rmd2html.render.process import run_command

logger = logging.getLogger(__name__)

# Chunk options match the book's knitting setup.
_KNIT_SCRIPT = """\
args <- commandArgs(trailingOnly = TRUE)
set.seed(1410)
options(digits = 3)
knitr::opts_knit$set(root.dir = args[3])
knitr::opts_chunk$set(
  comment = "#>",
  collapse = TRUE,
  error = FALSE,
  tidy = FALSE,
  fig.width = 4,
  fig.height = 4,
  dev = "png"
)
invisible(knitr::knit(args[1], args[2], quiet = TRUE, encoding = "UTF-8"))
"""


class KnitrRenderer(Renderer):
    """Knits an R Markdown source to markdown.

    Chunks are evaluated with ``work_dir`` as the working directory so
    relative data paths in a chapter resolve the way they do in the book.
    """

    name = "knitr"

    def __init__(
        self,
        rscript: str = "Rscript",
        work_dir: str | Path | None = None,
        timeout: float | None = None,
    ) -> None:
        self._rscript = rscript
        self._work_dir = Path(work_dir) if work_dir else Path.cwd()
        self._timeout = timeout

    async def render(self, source: str) -> str:
        with tempfile.TemporaryDirectory(prefix="rmd2html-knitr-") as tmp:
            tmp_dir = Path(tmp)
            script = tmp_dir / "knit.R"
            in_path = tmp_dir / "input.Rmd"
            out_path = tmp_dir / "output.md"
            script.write_text(_KNIT_SCRIPT, encoding="utf-8")
            # knitr wants a trailing newline on the last chunk
            in_path.write_text(source + "\n", encoding="utf-8")

            await run_command(
                [
                    self._rscript,
                    str(script),
                    str(in_path),
                    str(out_path),
                    str(self._work_dir),
                ],
                cwd=self._work_dir,
                timeout=self._timeout,
            )

            if not out_path.is_file():
                raise RenderError("knitr finished without writing any output")
            return out_path.read_text(encoding="utf-8")

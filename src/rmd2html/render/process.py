"""Subprocess shell-out used by the external renderers."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import shlex
from pathlib import Path

from rmd2html.errors.exceptions import RenderError

logger = logging.getLogger(__name__)


async def run_command(
    args: list[str],
    input_text: str = "",
    cwd: str | Path | None = None,
    timeout: float | None = None,
) -> str:
    """Run ``args``, feed ``input_text`` on stdin, return stdout as text.

    Raises RenderError if the executable is missing, the process exits
    non-zero, times out, or writes output that is not UTF-8.
    """
    command = list(args)
    logger.debug("Running %s", shlex.join(command))
    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
        )
    except OSError as e:
        raise RenderError(f"Cannot run {command[0]}: {e}", command=command) from e

    try:
        stdout, stderr = await asyncio.wait_for(
            proc.communicate(input_text.encode("utf-8")), timeout
        )
    except TimeoutError:
        raise RenderError(
            f"{command[0]} timed out after {timeout}s", command=command
        ) from None
    finally:
        # Timed out or cancelled: do not leave the child running
        if proc.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()

    err_text = stderr.decode("utf-8", errors="replace").strip()
    if proc.returncode != 0:
        detail = f": {err_text}" if err_text else ""
        raise RenderError(
            f"{command[0]} failed with exit status {proc.returncode}{detail}",
            command=command,
            returncode=proc.returncode,
            stderr=err_text,
        )
    if err_text:
        logger.debug("%s stderr: %s", command[0], err_text)

    try:
        return stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise RenderError(
            f"{command[0]} produced output that is not valid UTF-8",
            command=command,
            returncode=proc.returncode,
        ) from e

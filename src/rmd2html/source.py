"""Reading source documents, with missing and unreadable inputs told apart."""

from __future__ import annotations

import os
from pathlib import Path

from rmd2html.errors.exceptions import MissingInputError, UnreadableInputError


def read_source(path: str | Path) -> str:
    """Return the full text of ``path``.

    Raises MissingInputError if it does not exist and UnreadableInputError if
    it cannot be read or is not valid UTF-8.
    """
    path = Path(path)
    if not path.exists():
        raise MissingInputError(f"Can't find path {path}", path=path)
    if path.is_dir():
        raise UnreadableInputError(f"Can't read path {path}: is a directory", path=path)
    if not os.access(path, os.R_OK):
        raise UnreadableInputError(f"Can't read path {path}", path=path)

    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise UnreadableInputError(f"Can't read path {path}: {e.strerror or e}", path=path) from e

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise UnreadableInputError(
            f"Can't read path {path}: not valid UTF-8 (byte {e.start})", path=path
        ) from e

"""Cross-chapter links: turn ``](#id)`` into ``](Chapter.html#id)``.

Each chapter is rendered on its own, so an internal link to a section in
another chapter only works once it names that chapter's output file.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from rmd2html.render.base import Renderer

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^\s*(```|~~~)")
_HEADER_RE = re.compile(r"^(#{1,6})\s+(?P<title>.+?)\s*$")
_CLOSING_HASHES_RE = re.compile(r"\s+#+$")
_ATTR_RE = re.compile(r"\s*\{(?P<attrs>[^}]*)\}\s*$")
_EXPLICIT_ID_RE = re.compile(r"(?:^|\s)#(?P<id>[\w:.-]+)")
_LINK_RE = re.compile(r"\]\(#(?P<id>[^)\s]+)\)")


def auto_identifier(title: str) -> str:
    """Pandoc-style automatic identifier for a header title."""
    text = re.sub(r"\[([^\]]*)\]\([^)]*\)", r"\1", title)  # [text](url) -> text
    text = text.lower()
    text = re.sub(r"[^\w\s.-]", "", text)
    text = re.sub(r"\s+", "-", text.strip())
    # Everything before the first letter goes
    text = re.sub(r"^[\W\d_]+", "", text)
    return text or "section"


def header_ids(text: str) -> list[str]:
    """Anchor ids of all markdown headers outside fenced code blocks."""
    ids: list[str] = []
    in_fence = False
    for line in text.splitlines():
        if _FENCE_RE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        match = _HEADER_RE.match(line)
        if match is None:
            continue
        title = _CLOSING_HASHES_RE.sub("", match.group("title"))
        attrs = _ATTR_RE.search(title)
        if attrs:
            explicit = _EXPLICIT_ID_RE.search(attrs.group("attrs"))
            if explicit:
                ids.append(explicit.group("id"))
                continue
            title = title[: attrs.start()]
        ids.append(auto_identifier(title))
    return ids


def build_link_index(paths: Iterable[str | Path], out_ext: str = ".html") -> dict[str, str]:
    """Map every header id in ``paths`` to the output file that will hold it.

    Files that cannot be read as UTF-8 are skipped with a warning; they
    report their own errors when rendered.
    """
    index: dict[str, str] = {}
    for path in paths:
        path = Path(path)
        target = f"{path.stem}{out_ext}"
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping %s when indexing links: %s", path, e)
            continue
        for anchor in header_ids(text):
            if anchor in index and index[anchor] != target:
                logger.warning(
                    "Duplicate anchor #%s in %s (already in %s)", anchor, target, index[anchor]
                )
                continue
            index.setdefault(anchor, target)
    return index


def rewrite_links(text: str, index: dict[str, str]) -> str:
    """Qualify internal links with the file that defines the anchor.

    Links to anchors that are not in ``index`` are left unchanged.
    """

    def _replace(match: re.Match[str]) -> str:
        anchor = match.group("id")
        target = index.get(anchor)
        if target is None:
            logger.debug("No chapter defines #%s", anchor)
            return match.group(0)
        return f"]({target}#{anchor})"

    return _LINK_RE.sub(_replace, text)


class LinkRewriter(Renderer):
    """Pipeline stage wrapper around ``rewrite_links``."""

    name = "links"

    def __init__(self, index: dict[str, str]) -> None:
        self._index = dict(index)

    @property
    def index(self) -> dict[str, str]:
        return dict(self._index)

    async def render(self, source: str) -> str:
        return rewrite_links(source, self._index)

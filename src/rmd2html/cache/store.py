"""On-disk render cache: one file per content hash, written atomically."""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel

from rmd2html.cache.keys import cache_filename, hash_text, normalize_ext
from rmd2html.cache.locks import KeyedLock
from rmd2html.cache.stats import CacheEntry, CacheStats
from rmd2html.errors.exceptions import CacheError

if TYPE_CHECKING:
    from rmd2html.render.base import Renderer

logger = logging.getLogger(__name__)

_TEMP_PREFIX = ".tmp-"
_ENTRY_RE = re.compile(
    r"^(?P<key>[0-9a-f]{64})(?:\.(?P<tag>[A-Za-z0-9_-]+)(?=\.))?(?P<ext>\..+)?$"
)


class CachedRender(BaseModel):
    """Outcome of one cache-or-render call."""

    key: str
    path: Path | None = None
    output: str
    cached: bool = False


class RenderCache:
    """Content-addressed cache of rendered output.

    Entries are never invalidated or evicted; growth is unbounded. The cache
    root is always passed in explicitly.
    """

    def __init__(self, cache_dir: str | Path, enabled: bool = True) -> None:
        self._cache_dir = Path(cache_dir)
        self._enabled = enabled
        self._locks = KeyedLock()
        self._stats = CacheStats()

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    @property
    def enabled(self) -> bool:
        return self._enabled

    def path_for(self, key: str, ext: str = "", tag: str = "") -> Path:
        return self._cache_dir / cache_filename(key, ext, tag)

    def lookup(self, key: str, ext: str = "", tag: str = "") -> str | None:
        """Return the stored output verbatim, or None on a miss.

        Raises CacheError if the entry exists but is not UTF-8 text.
        """
        if not self._enabled:
            self._stats.misses += 1
            return None
        path = self.path_for(key, ext, tag)
        if not path.is_file():
            self._stats.misses += 1
            return None
        try:
            with open(path, encoding="utf-8", newline="") as f:
                output = f.read()
        except UnicodeDecodeError as e:
            raise CacheError(
                f"Cache entry {path} is not valid UTF-8; run 'rmd2html cache clear'",
                path=path,
            ) from e
        self._stats.hits += 1
        logger.info("Using cache %s", path)
        return output

    def store(self, key: str, ext: str, output: str, tag: str = "") -> Path:
        """Write an entry via temp file + rename so readers never see it partial."""
        path = self.path_for(key, ext, tag)
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        tmp = tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            newline="",
            dir=self._cache_dir,
            prefix=_TEMP_PREFIX,
            suffix=normalize_ext(ext),
            delete=False,
        )
        try:
            with tmp:
                tmp.write(output)
            os.replace(tmp.name, path)
        except BaseException:
            Path(tmp.name).unlink(missing_ok=True)
            raise
        logger.debug("Stored %d chars in %s", len(output), path)
        return path

    async def get_or_render(
        self,
        source: str,
        renderer: Renderer,
        ext: str = "",
    ) -> CachedRender:
        """Serve ``source`` from cache, or render it and store the result.

        Concurrent callers for the same key wait on the first one and then
        read its entry. A RenderError propagates and leaves nothing behind.
        """
        key = hash_text(source)
        tag = renderer.cache_tag

        if not self._enabled:
            self._stats.misses += 1
            output = await renderer.render(source)
            return CachedRender(key=key, output=output)

        async with self._locks.hold(cache_filename(key, ext, tag)):
            cached = self.lookup(key, ext, tag)
            if cached is not None:
                return CachedRender(
                    key=key, path=self.path_for(key, ext, tag), output=cached, cached=True
                )

            logger.info("Cache miss for %s, rendering with %s", key[:12], renderer.name)
            output = await renderer.render(source)
            path = self.store(key, ext, output, tag)
            return CachedRender(key=key, path=path, output=output)

    def entries(self, ext: str | None = None) -> list[CacheEntry]:
        """List stored entries, optionally only those with extension ``ext``."""
        if not self._cache_dir.is_dir():
            return []
        wanted = normalize_ext(ext) if ext else None
        result: list[CacheEntry] = []
        for path in sorted(self._cache_dir.iterdir()):
            match = _ENTRY_RE.match(path.name)
            if match is None or not path.is_file():
                continue
            entry_ext = match.group("ext") or ""
            if wanted is not None and entry_ext != wanted:
                continue
            st = path.stat()
            result.append(
                CacheEntry(
                    key=match.group("key"),
                    ext=entry_ext,
                    tag=match.group("tag") or "",
                    path=path,
                    size_bytes=st.st_size,
                    modified_at=st.st_mtime,
                )
            )
        return result

    def clear(self, ext: str | None = None) -> int:
        """Delete entries (all, or only ``ext``). Returns count deleted."""
        removed = 0
        for entry in self.entries(ext):
            entry.path.unlink(missing_ok=True)
            removed += 1
        if ext is None:
            # Leftovers from interrupted writes; not counted as entries
            if self._cache_dir.is_dir():
                for leftover in self._cache_dir.glob(f"{_TEMP_PREFIX}*"):
                    leftover.unlink(missing_ok=True)
            self._stats = CacheStats()
        return removed

    def stats(self) -> CacheStats:
        entries = self.entries()
        return CacheStats(
            entries=len(entries),
            size_mb=sum(e.size_bytes for e in entries) / (1024 * 1024),
            hits=self._stats.hits,
            misses=self._stats.misses,
        )

"""Cache key generation — content-addressed by SHA-256."""

from __future__ import annotations

import hashlib
import re
from pathlib import Path

CHUNK_SIZE = 65536  # 64 KiB read chunks
_TAG_UNSAFE_RE = re.compile(r"[^A-Za-z0-9_-]+")


def hash_bytes(data: bytes) -> str:
    """Hash raw bytes for cache key use."""
    return hashlib.sha256(data).hexdigest()


def hash_text(text: str) -> str:
    """Hash text as UTF-8.

    For a UTF-8 file this equals ``hash_file`` of that file.
    """
    return hash_bytes(text.encode("utf-8"))


def hash_file(path: str | Path) -> str:
    """Hash the full byte contents of a file, reading in chunks."""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        while True:
            chunk = f.read(CHUNK_SIZE)
            if not chunk:
                break
            h.update(chunk)
    return h.hexdigest()


def normalize_ext(ext: str) -> str:
    if not ext:
        return ""
    return ext if ext.startswith(".") else f".{ext}"


def normalize_tag(tag: str) -> str:
    """Reduce a renderer tag to characters that are safe in a filename."""
    return _TAG_UNSAFE_RE.sub("-", tag).strip("-")


def cache_filename(key: str, ext: str = "", tag: str = "") -> str:
    """Filename of the cache entry for ``key``; same inputs, same name.

    ``tag`` names the renderer that produced the entry, so two renderers
    given the same source never share an entry: ``<key>.<tag><ext>``.
    """
    tag = normalize_tag(tag)
    infix = f".{tag}" if tag else ""
    return f"{key}{infix}{normalize_ext(ext)}"

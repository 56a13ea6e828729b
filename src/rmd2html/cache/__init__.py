"""Cache subsystem — content-addressed render outputs on disk."""

from rmd2html.cache.keys import cache_filename, hash_bytes, hash_file, hash_text
from rmd2html.cache.locks import KeyedLock
from rmd2html.cache.stats import CacheEntry, CacheStats
from rmd2html.cache.store import CachedRender, RenderCache

__all__ = [
    "RenderCache",
    "CachedRender",
    "CacheEntry",
    "CacheStats",
    "KeyedLock",
    "cache_filename",
    "hash_bytes",
    "hash_file",
    "hash_text",
]

"""Package-level default configuration values."""

from __future__ import annotations

from typing import Any

# Default cache settings
DEFAULT_CACHE_DIR = "_cache"
DEFAULT_CACHE_DISABLED = False

# Default renderer settings
DEFAULT_RENDERER = "auto"
DEFAULT_OUTPUT_EXT = ".html"
DEFAULT_PANDOC_PATH = "pandoc"
DEFAULT_RSCRIPT_PATH = "Rscript"
DEFAULT_FROM_FORMAT = "markdown"
DEFAULT_TO_FORMAT = "html"
DEFAULT_FIX_LINKS = True
DEFAULT_RENDER_TIMEOUT = None  # no timeout

# Default concurrency settings
DEFAULT_MAX_WORKERS = 4

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "cache_dir": DEFAULT_CACHE_DIR,
        "cache_disabled": DEFAULT_CACHE_DISABLED,
        "renderer": DEFAULT_RENDERER,
        "command": None,
        "output_ext": DEFAULT_OUTPUT_EXT,
        "pandoc_path": DEFAULT_PANDOC_PATH,
        "rscript_path": DEFAULT_RSCRIPT_PATH,
        "from_format": DEFAULT_FROM_FORMAT,
        "to_format": DEFAULT_TO_FORMAT,
        "fix_links": DEFAULT_FIX_LINKS,
        "render_timeout": DEFAULT_RENDER_TIMEOUT,
        "max_workers": DEFAULT_MAX_WORKERS,
        "log_level": DEFAULT_LOG_LEVEL,
    }

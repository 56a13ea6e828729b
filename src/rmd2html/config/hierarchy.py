"""Configuration hierarchy — merges sources in priority order.

Later sources override earlier ones: package defaults, the user file
``~/.rmd2html/config.yaml``, the nearest ``rmd2html.yaml`` at or above the
working directory, ``RMD2HTML_*`` environment variables, and finally
arguments passed at runtime.

A relative ``cache_dir`` in a config file is taken relative to that file, so a
book's cache stays next to the book whichever directory the build runs from.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import yaml

from rmd2html.config.defaults import get_defaults

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".rmd2html" / "config.yaml"
_PROJECT_CONFIG_NAME = "rmd2html.yaml"
_ENV_PREFIX = "RMD2HTML_"

# Environment variable suffixes that do not match their config key
_ENV_ALIASES: dict[str, str] = {
    "PANDOC": "pandoc_path",
    "RSCRIPT": "rscript_path",
}

_ENV_KEYS = (
    "cache_dir",
    "cache_disabled",
    "renderer",
    "command",
    "output_ext",
    "pandoc_path",
    "rscript_path",
    "from_format",
    "to_format",
    "fix_links",
    "render_timeout",
    "max_workers",
    "log_level",
)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


_CONVERTERS: dict[str, Callable[[str], Any]] = {
    "cache_disabled": _parse_bool,
    "fix_links": _parse_bool,
    "render_timeout": float,
    "max_workers": int,
}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Load and merge configuration from all sources.

    Runtime overrides set to None are ignored, so unset CLI options never
    mask a value from a file or the environment.
    """
    config = get_defaults()
    for path in _config_files():
        data = _load_yaml_config(path)
        if data:
            logger.debug("Loaded config from %s", path)
            config.update(_anchor_paths(data, path.parent))
    config.update(_load_env_vars())
    config.update({k: v for k, v in runtime_overrides.items() if v is not None})
    return config


def _config_files() -> Iterator[Path]:
    yield _GLOBAL_CONFIG_PATH
    project = _find_project_config()
    if project is not None:
        yield project


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Parse ``path`` as a YAML mapping; None if absent or unusable."""
    if not path.is_file():
        return None
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring", path)
        return None
    return data


def _anchor_paths(cfg: dict[str, Any], base_dir: Path) -> dict[str, Any]:
    cache_dir = cfg.get("cache_dir")
    if not cache_dir:
        return cfg
    path = Path(str(cache_dir)).expanduser()
    return {**cfg, "cache_dir": str(path if path.is_absolute() else base_dir / path)}


def _find_project_config() -> Path | None:
    here = Path.cwd()
    candidates = (d / _PROJECT_CONFIG_NAME for d in (here, *here.parents))
    return next((c for c in candidates if c.exists()), None)


def _env_name(key: str) -> str:
    for suffix, alias in _ENV_ALIASES.items():
        if alias == key:
            return _ENV_PREFIX + suffix
    return _ENV_PREFIX + key.upper()


def _load_env_vars() -> dict[str, Any]:
    """Settings found in ``RMD2HTML_*`` variables, already typed."""
    found: dict[str, Any] = {}
    for key in _ENV_KEYS:
        raw = os.environ.get(_env_name(key))
        if raw is not None:
            found[key] = _coerce_env_value(key, raw)
    return found


def _coerce_env_value(key: str, value: str) -> Any:
    """Convert a raw variable to the key's type, leaving bad values to validation."""
    convert = _CONVERTERS.get(key)
    if convert is None:
        return value
    try:
        return convert(value)
    except ValueError:
        logger.warning("Cannot convert %s=%r for '%s'", _env_name(key), value, key)
        return value

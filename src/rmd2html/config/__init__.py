"""Configuration — package defaults, YAML files, environment, runtime args."""

from rmd2html.config.hierarchy import load_config_hierarchy
from rmd2html.config.schema import RenderSettings, load_settings

__all__ = ["RenderSettings", "load_config_hierarchy", "load_settings"]

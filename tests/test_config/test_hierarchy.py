"""Tests for config hierarchy."""

from rmd2html.config.hierarchy import (
    _coerce_env_value,
    _load_yaml_config,
    load_config_hierarchy,
)


class TestLoadConfigHierarchy:
    def test_returns_defaults(self):
        config = load_config_hierarchy()
        assert config["cache_dir"] == "_cache"
        assert config["renderer"] == "auto"
        assert config["max_workers"] == 4

    def test_runtime_overrides(self):
        config = load_config_hierarchy(renderer="knitr", max_workers=8)
        assert config["renderer"] == "knitr"
        assert config["max_workers"] == 8

    def test_none_overrides_ignored(self):
        config = load_config_hierarchy(renderer=None)
        assert config["renderer"] == "auto"  # Default preserved

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("RMD2HTML_PANDOC", "/opt/pandoc/bin/pandoc")
        config = load_config_hierarchy()
        assert config["pandoc_path"] == "/opt/pandoc/bin/pandoc"

    def test_runtime_beats_env(self, monkeypatch):
        monkeypatch.setenv("RMD2HTML_RENDERER", "markdown")
        config = load_config_hierarchy(renderer="knitr")
        assert config["renderer"] == "knitr"  # Runtime wins

    def test_env_numeric_coercion(self, monkeypatch):
        monkeypatch.setenv("RMD2HTML_MAX_WORKERS", "10")
        monkeypatch.setenv("RMD2HTML_RENDER_TIMEOUT", "2.5")
        config = load_config_hierarchy()
        assert config["max_workers"] == 10
        assert config["render_timeout"] == 2.5

    def test_env_bool_coercion(self, monkeypatch):
        monkeypatch.setenv("RMD2HTML_CACHE_DISABLED", "yes")
        monkeypatch.setenv("RMD2HTML_FIX_LINKS", "0")
        config = load_config_hierarchy()
        assert config["cache_disabled"] is True
        assert config["fix_links"] is False

    def test_project_config(self, tmp_path, monkeypatch):
        (tmp_path / "rmd2html.yaml").write_text("renderer: rmarkdown\ncache_dir: build/cache\n")
        sub = tmp_path / "chapters"
        sub.mkdir()
        monkeypatch.chdir(sub)
        config = load_config_hierarchy()
        assert config["renderer"] == "rmarkdown"
        # Relative cache_dir anchored at the config file, not the cwd
        assert config["cache_dir"] == str(tmp_path / "build" / "cache")

    def test_global_config(self, tmp_path):
        (tmp_path / "global-config.yaml").write_text("pandoc_path: /usr/local/bin/pandoc\n")
        config = load_config_hierarchy()
        assert config["pandoc_path"] == "/usr/local/bin/pandoc"

    def test_project_beats_global(self, tmp_path):
        (tmp_path / "global-config.yaml").write_text("to_format: html4\n")
        (tmp_path / "rmd2html.yaml").write_text("to_format: html5\n")
        config = load_config_hierarchy()
        assert config["to_format"] == "html5"


class TestLoadYamlConfig:
    def test_loads_valid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("key: value\n")
        assert _load_yaml_config(path) == {"key": "value"}

    def test_returns_none_for_missing(self, tmp_path):
        assert _load_yaml_config(tmp_path / "nonexistent.yaml") is None

    def test_returns_none_for_non_dict(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- item1\n- item2\n")
        assert _load_yaml_config(path) is None

    def test_returns_none_for_broken_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("key: [unclosed\n")
        assert _load_yaml_config(path) is None


class TestCoerceEnvValue:
    def test_bool_true(self):
        assert _coerce_env_value("cache_disabled", "true") is True
        assert _coerce_env_value("cache_disabled", "1") is True
        assert _coerce_env_value("fix_links", "on") is True

    def test_bool_false(self):
        assert _coerce_env_value("cache_disabled", "false") is False
        assert _coerce_env_value("fix_links", "no") is False

    def test_int_coercion(self):
        assert _coerce_env_value("max_workers", "10") == 10

    def test_bad_number_passes_through(self):
        assert _coerce_env_value("max_workers", "many") == "many"

    def test_string_passthrough(self):
        assert _coerce_env_value("command", "pandoc -t html5") == "pandoc -t html5"

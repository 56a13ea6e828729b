"""Tests for custom exception hierarchy."""

from pathlib import Path

from rmd2html.errors.exceptions import (
    CacheError,
    ConfigError,
    InputError,
    MissingInputError,
    RenderError,
    Rmd2HtmlError,
    UnreadableInputError,
)


class TestExceptionHierarchy:
    def test_all_inherit_from_base(self):
        assert issubclass(InputError, Rmd2HtmlError)
        assert issubclass(RenderError, Rmd2HtmlError)
        assert issubclass(ConfigError, Rmd2HtmlError)
        assert issubclass(CacheError, Rmd2HtmlError)

    def test_input_errors(self):
        assert issubclass(MissingInputError, InputError)
        assert issubclass(UnreadableInputError, InputError)

    def test_all_inherit_from_exception(self):
        assert issubclass(Rmd2HtmlError, Exception)


class TestInputError:
    def test_path_attribute(self):
        err = MissingInputError("Can't find path a.md", path="a.md")
        assert err.path == Path("a.md")
        assert err.message == "Can't find path a.md"
        assert str(err) == "Can't find path a.md"

    def test_path_optional(self):
        assert UnreadableInputError("x").path is None


class TestRenderError:
    def test_attributes(self):
        err = RenderError(
            "pandoc failed", command=["pandoc", "-t", "html"], returncode=64, stderr="bad"
        )
        assert err.command == ["pandoc", "-t", "html"]
        assert err.returncode == 64
        assert err.stderr == "bad"
        assert "pandoc failed" in str(err)

    def test_defaults(self):
        err = RenderError("failed")
        assert err.command is None
        assert err.returncode is None
        assert err.stderr == ""

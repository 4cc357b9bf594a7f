"""Tests for tabby._errors — error hierarchy."""

import pytest

from tabby._errors import (
    ConfigError,
    ConfigurationError,
    ContentError,
    CopyError,
    OutputPermissionError,
    RenderError,
    TabbyError,
    UnsafeOverwriteError,
)


class TestErrorHierarchy:
    """All tabby errors inherit from TabbyError."""

    @pytest.mark.parametrize(
        "error_cls",
        [ConfigError, OutputPermissionError, UnsafeOverwriteError, ContentError, RenderError, CopyError],
    )
    def test_inherits_tabby_error(self, error_cls: type[Exception]) -> None:
        assert issubclass(error_cls, TabbyError)

    def test_configuration_alias(self) -> None:
        assert ConfigurationError is ConfigError

    def test_permission_error_is_builtin_too(self) -> None:
        with pytest.raises(PermissionError):
            raise OutputPermissionError("read-only")

    def test_catch_all(self) -> None:
        with pytest.raises(TabbyError):
            raise UnsafeOverwriteError("foreign files")


class TestRenderError:
    def test_attributes(self) -> None:
        err = RenderError("failed", key="about", language="de", file="/templates/x.html", line=4)
        assert str(err) == "failed"
        assert err.key == "about"
        assert err.language == "de"
        assert err.file == "/templates/x.html"
        assert err.line == 4

    def test_defaults(self) -> None:
        err = RenderError("failed")
        assert err.key == ""
        assert err.language is None
        assert err.line == 0

"""Tests for tabby package exports and metadata."""

import tomllib
from pathlib import Path

import pytest

import tabby

_PYPROJECT = Path(__file__).parent.parent / "pyproject.toml"


class TestPackageMetadata:
    """Package-level exports and metadata."""

    def test_version_string(self) -> None:
        assert isinstance(tabby.__version__, str)
        assert "0.1.0" in tabby.__version__

    def test_free_threading_declaration(self) -> None:
        assert tabby._Py_mod_gil == 0

    def test_python_floor_matches_template_engine(self) -> None:
        project = tomllib.loads(_PYPROJECT.read_text(encoding="utf-8"))["project"]
        assert project["requires-python"] == ">=3.14"
        assert "kida-templates" in project["dependencies"]

    def test_all_exports_resolvable(self) -> None:
        for name in tabby.__all__:
            getattr(tabby, name)

    def test_lazy_exports(self) -> None:
        from tabby.config import TabbyConfig
        from tabby.export.static import StaticSiteGenerator

        assert tabby.TabbyConfig is TabbyConfig
        assert tabby.StaticSiteGenerator is StaticSiteGenerator

    def test_invalid_attribute_raises(self) -> None:
        with pytest.raises(AttributeError, match="no attribute"):
            tabby.nonexistent_thing  # type: ignore[attr-defined]  # noqa: B018


class TestSubpackageExports:
    def test_export_all(self) -> None:
        import tabby.export

        for name in tabby.export.__all__:
            getattr(tabby.export, name)

    def test_content_all(self) -> None:
        import tabby.content

        for name in tabby.content.__all__:
            getattr(tabby.content, name)

    def test_plugins_import_standalone(self) -> None:
        import tabby.plugins

        assert callable(tabby.plugins.discover_plugin_assets)

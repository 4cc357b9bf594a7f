"""Tests for tabby.export.paths — resolve and clean_path."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from tabby.export.paths import clean_path, resolve, resolve_many


class TestResolve:
    """resolve — anchor ``./`` paths at the project root."""

    def test_empty_path(self, tmp_path: Path) -> None:
        assert resolve("", tmp_path) == ""
        assert resolve(None, tmp_path) == ""

    def test_dot_relative_joined_to_root(self, tmp_path: Path) -> None:
        assert resolve("./static", "/proj") == "/proj/static"

    def test_dot_dot_relative(self) -> None:
        assert resolve("../shared", "/proj/site") == "/proj/shared"

    def test_absolute_path_unchanged(self) -> None:
        assert resolve("/abs/path", "/proj") == "/abs/path"

    def test_existing_path_is_canonical(self, tmp_path: Path) -> None:
        target = tmp_path / "real"
        target.mkdir()
        link = tmp_path / "link"
        link.symlink_to(target)
        assert resolve(str(link), "/elsewhere") == os.path.realpath(target)

    def test_missing_path_is_normalized(self, tmp_path: Path) -> None:
        result = resolve("./a/../b/", tmp_path)
        assert result == os.path.normpath(f"{tmp_path}/b")

    def test_accepts_pathlike(self, tmp_path: Path) -> None:
        assert resolve(Path("/abs/x"), tmp_path) == "/abs/x"


class TestResolveMany:
    def test_drops_empty_keeps_order(self) -> None:
        assert resolve_many(["./b", "", None, "/a"], "/proj") == ["/proj/b", "/a"]


class TestCleanPath:
    """clean_path — collapse separators and redundant index suffixes."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("/about//index.html", "/about/index.html"),
            ("//about///index.html", "/about/index.html"),
            ("/feed.xml/index.html", "/feed.xml"),
            ("/blog/feed.json/index.html", "/blog/feed.json"),
            ("/.well-known/index.html", "/.well-known"),
            ("/about/index.html", "/about/index.html"),
            ("/index.html", "/index.html"),
        ],
    )
    def test_cleaning(self, raw: str, expected: str) -> None:
        assert clean_path(raw) == expected

    def test_dotted_segment_drops_index(self) -> None:
        assert clean_path("/v1.release/index.html") == "/v1.release"

    def test_index_in_middle_untouched(self) -> None:
        assert clean_path("/feed.xml/index.html/more") == "/feed.xml/index.html/more"

    def test_custom_index_file_name(self) -> None:
        assert clean_path("/feed.xml/index.htm", "index.htm") == "/feed.xml"
        assert clean_path("/feed.xml/index.html", "index.htm") == "/feed.xml/index.html"

    def test_index_name_is_literal(self) -> None:
        # "." in the index name must not match arbitrary characters
        assert clean_path("/feed.xml/indexXhtml") == "/feed.xml/indexXhtml"

    @pytest.mark.parametrize(
        "raw",
        [
            "/a//b.css/index.html",
            "/x.tar.gz/index.html/index.html",
            "//.hidden//index.html",
            "/plain/path",
        ],
    )
    def test_idempotent(self, raw: str) -> None:
        once = clean_path(raw)
        assert clean_path(once) == once

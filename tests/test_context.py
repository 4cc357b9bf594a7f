"""Tests for tabby.export.context — switch_language and RenderContext."""

from __future__ import annotations

from pathlib import Path

import pytest

from tabby.export.context import RenderContext, reset_tree, switch_language
from tabby.export.media import MediaCollector

from .conftest import FakeFile, FakeSite


class TestRenderContext:
    def test_frozen(self, fake_site: FakeSite) -> None:
        ctx = RenderContext(language=None, node=fake_site.pages["about"], base_url="/")
        with pytest.raises(AttributeError):
            ctx.language = "de"  # type: ignore[misc]

    def test_record_media_without_collector(self, fake_site: FakeSite) -> None:
        ctx = RenderContext(language=None, node=fake_site.pages["about"], base_url="/")
        ctx.record_media("/a.jpg", "/media/a.jpg")

    def test_record_media_with_collector(self, fake_site: FakeSite) -> None:
        media = MediaCollector()
        media.activate()
        ctx = RenderContext(None, fake_site.pages["about"], "/", media)
        ctx.record_media("/a.jpg", "/media/a.jpg")
        assert len(media) == 1


class TestResetTree:
    def test_resets_descendants_and_files(self, fake_site: FakeSite, tmp_path: Path) -> None:
        blog = fake_site.pages["blog"]
        attachment = FakeFile(tmp_path / "cover.jpg")
        fake_site.pages["blog/first"].file_list.append(attachment)

        reset_tree(blog)

        assert blog.resets == 1
        assert fake_site.pages["blog/first"].resets == 1
        assert attachment.resets == 1
        assert fake_site.pages["about"].resets == 0


class TestSwitchLanguage:
    """switch_language — drop caches and point the site at one page."""

    def test_call_order(self, multilang_site: FakeSite) -> None:
        about = multilang_site.pages["about"]
        switch_language(multilang_site, about, "de")
        assert multilang_site.calls == [
            "reset_collections",
            ("set_language", "de"),
            "flush_render_cache",
            ("visit", "about", "de"),
        ]

    def test_resets_whole_tree(self, fake_site: FakeSite) -> None:
        switch_language(fake_site, fake_site.pages["about"], None)
        assert fake_site.resets == 1
        assert all(page.resets >= 1 for page in fake_site.pages.values())

    def test_node_reset_twice_when_in_tree(self, fake_site: FakeSite) -> None:
        about = fake_site.pages["about"]
        switch_language(fake_site, about, None)
        # once through the site, once directly
        assert about.resets == 2

    def test_placeholder_skipped_without_force(self, fake_site: FakeSite) -> None:
        placeholder = fake_site.placeholder_page()
        switch_language(fake_site, placeholder, None, force_reset=False)
        assert placeholder.resets == 0

    def test_placeholder_reset_with_force(self, fake_site: FakeSite) -> None:
        placeholder = fake_site.placeholder_page()
        switch_language(fake_site, placeholder, None, force_reset=True)
        assert placeholder.resets == 1

    def test_returns_context(self, fake_site: FakeSite) -> None:
        fake_site.base_url = "https://example.com"
        media = MediaCollector()
        about = fake_site.pages["about"]
        ctx = switch_language(fake_site, about, "en", media=media)
        assert ctx.node is about
        assert ctx.language == "en"
        assert ctx.base_url == "https://example.com"
        assert ctx.media is media

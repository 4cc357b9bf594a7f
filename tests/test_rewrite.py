"""Tests for tabby.export.rewrite — render-time base substitution."""

from __future__ import annotations

from tabby.export.rewrite import json_escape, rewrite_urls

RENDER = "https://tabby-render-0123456789ab"


class TestJsonEscape:
    def test_escapes_slashes(self) -> None:
        assert json_escape("https://example.com/") == "https:\\/\\/example.com\\/"

    def test_escapes_quotes(self) -> None:
        assert json_escape('a"b') == 'a\\"b'


class TestRewriteUrls:
    """rewrite_urls — plain and JSON-escaped forms."""

    def test_path_under_base(self) -> None:
        html = f'<a href="{RENDER}/about">About</a>'
        assert rewrite_urls(html, RENDER, "/") == '<a href="/about">About</a>'

    def test_bare_base(self) -> None:
        html = f'<a href="{RENDER}">Home</a>'
        assert rewrite_urls(html, RENDER, "/") == '<a href="/">Home</a>'

    def test_absolute_target(self) -> None:
        html = f"{RENDER}/blog/first"
        assert rewrite_urls(html, RENDER, "https://example.com/") == "https://example.com/blog/first"

    def test_escaped_forms(self) -> None:
        escaped = json_escape(RENDER)
        script = f'{{"home": "{escaped}", "about": "{escaped}\\/about"}}'
        result = rewrite_urls(script, RENDER, "https://example.com/")
        assert result == '{"home": "https:\\/\\/example.com\\/", "about": "https:\\/\\/example.com\\/about"}'

    def test_no_render_base_left(self) -> None:
        escaped = json_escape(RENDER)
        content = f"{RENDER} {RENDER}/x {escaped} {escaped}\\/y"
        assert "tabby-render" not in rewrite_urls(content, RENDER, "/sub/")

    def test_empty_from_base_is_noop(self) -> None:
        assert rewrite_urls("/about", "", "/") == "/about"

    def test_same_base_is_noop(self) -> None:
        assert rewrite_urls("https://a.com/x", "https://a.com/", "https://a.com/") == "https://a.com/x"

    def test_unrelated_content_untouched(self) -> None:
        assert rewrite_urls("<p>hello</p>", RENDER, "/") == "<p>hello</p>"

    def test_target_containing_source_rewritten_once(self) -> None:
        html = '<a href="https://ex.com/about">About</a><a href="https://ex.com">Home</a>'
        result = rewrite_urls(html, "https://ex.com", "https://ex.com/docs/")
        assert result == (
            '<a href="https://ex.com/docs/about">About</a>'
            '<a href="https://ex.com/docs/">Home</a>'
        )

    def test_escaped_target_containing_source_rewritten_once(self) -> None:
        content = f'"{json_escape("https://ex.com")}\\/about"'
        result = rewrite_urls(content, "https://ex.com", "https://ex.com/docs/")
        assert result == '"https:\\/\\/ex.com\\/docs\\/about"'

    def test_slashless_base_uses_plain_target(self) -> None:
        assert rewrite_urls("x base y base/z", "base", "/out/") == "x /out/ y /out/z"

"""Tests for tabby.content.router — SiteRouter."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest

from tabby._errors import ContentError
from tabby.content.protocols import EMPTY, NodeResult, TextResult
from tabby.content.router import SiteRouter
from tabby.routes.loader import RouteDefinition, RouteRequest

from .conftest import FakeSite


def _route(path: str, handler: Any) -> RouteDefinition:
    return RouteDefinition(
        path=path, handler=handler, methods=("GET",),
        name=f"route:{path}", source=Path("routes/x.py"),
    )


@dataclass
class _Response:
    body: Any


class TestResolvePages:
    """Paths without a route module resolve to pages by key."""

    def test_page_by_key(self, fake_site: FakeSite) -> None:
        router = SiteRouter(fake_site.find_page, home_page=fake_site.home_page)
        assert router.resolve("/blog/first") == NodeResult(fake_site.pages["blog/first"])

    def test_root_is_home(self, fake_site: FakeSite) -> None:
        router = SiteRouter(fake_site.find_page, home_page=fake_site.home_page)
        assert router.resolve("/") == NodeResult(fake_site.pages["home"])

    def test_root_without_home(self, fake_site: FakeSite) -> None:
        router = SiteRouter(fake_site.find_page)
        assert router.resolve("/") is EMPTY

    def test_missing(self, fake_site: FakeSite) -> None:
        router = SiteRouter(fake_site.find_page)
        assert router.resolve("/nope") is EMPTY


class TestResolveRoutes:
    """Route module handlers take precedence over pages."""

    def test_async_str(self, fake_site: FakeSite) -> None:
        async def get(request: RouteRequest) -> str:
            return f"<rss>{request.path}</rss>"

        router = SiteRouter(fake_site.find_page, [_route("/feed.xml", get)])
        assert router.resolve("feed.xml") == TextResult("<rss>/feed.xml</rss>")

    def test_params(self, fake_site: FakeSite) -> None:
        async def get(request: RouteRequest) -> str:
            return request.params["tag"]

        router = SiteRouter(fake_site.find_page, [_route("/tags/{tag}", get)])
        assert router.resolve("/tags/cats") == TextResult("cats")

    def test_route_shadows_page(self, fake_site: FakeSite) -> None:
        async def get(request: RouteRequest) -> str:
            return "override"

        router = SiteRouter(fake_site.find_page, [_route("/about", get)])
        assert router.resolve("/about") == TextResult("override")

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, EMPTY),
            (b"bytes", TextResult("bytes")),
            (_Response(body="resp"), TextResult("resp")),
            (_Response(body=b"raw"), TextResult("raw")),
            (TextResult("as-is"), TextResult("as-is")),
        ],
    )
    def test_return_values(self, fake_site: FakeSite, value: object, expected: object) -> None:
        async def get(request: RouteRequest) -> object:
            return value

        router = SiteRouter(fake_site.find_page, [_route("/x", get)])
        assert router.resolve("/x") == expected

    def test_returns_page(self, fake_site: FakeSite) -> None:
        about = fake_site.pages["about"]

        async def get(request: RouteRequest) -> object:
            return about

        router = SiteRouter(fake_site.find_page, [_route("/x", get)])
        assert router.resolve("/x") == NodeResult(about)

    def test_unsupported_value(self, fake_site: FakeSite) -> None:
        async def get(request: RouteRequest) -> object:
            return 42

        router = SiteRouter(fake_site.find_page, [_route("/x", get)])
        with pytest.raises(ContentError, match="returned int"):
            router.resolve("/x")

    def test_definitions_exposed(self, fake_site: FakeSite) -> None:
        async def get(request: RouteRequest) -> str:
            return ""

        defn = _route("/x", get)
        assert SiteRouter(fake_site.find_page, [defn]).definitions == (defn,)

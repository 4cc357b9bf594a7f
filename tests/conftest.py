"""Shared test fixtures for tabby."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest

from tabby.content.protocols import EMPTY, PluginAsset, RouteResult


# ---------------------------------------------------------------------------
# Content fakes
# ---------------------------------------------------------------------------


class FakeFile:
    """A file attached to a fake page; counts cache resets."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.resets = 0

    def reset_content(self) -> None:
        self.resets += 1


class FakePage:
    """A page that renders a small HTML snippet linking to itself.

    ``media`` names files (absolute paths) whose URLs the page reports while
    rendering.  ``error`` is raised from ``render`` when set.
    """

    def __init__(
        self,
        site: FakeSite,
        key: str,
        *,
        translations: Iterable[str] | None = None,
        media: Sequence[Path] = (),
        exists: bool = True,
        error: BaseException | None = None,
    ) -> None:
        self.site = site
        self._key = key
        self.translations = None if translations is None else set(translations)
        self.media = list(media)
        self._exists = exists
        self.error = error
        self.child_pages: list[FakePage] = []
        self.file_list: list[FakeFile] = []
        self.resets = 0
        self.detached = 0
        self.renders: list[tuple[str | None, dict[str, Any]]] = []

    def __repr__(self) -> str:
        return f"FakePage({self._key!r})"

    @property
    def key(self) -> str:
        return self._key

    @property
    def is_home(self) -> bool:
        return self._key == "home"

    def url(self, language: str | None = None) -> str:
        base = self.site.base_url.rstrip("/")
        prefix = "" if language in (None, self.site.default_language) else f"/{language}"
        if self.is_home:
            return f"{base}{prefix}" or "/"
        return f"{base}{prefix}/{self._key}"

    def render(self, context: Any, data: Mapping[str, Any]) -> str:
        if self.error is not None:
            raise self.error
        self.renders.append((context.language, dict(data)))
        for path in self.media:
            url = f"{context.base_url}/media/pages/{self._key}/{path.name}"
            context.record_media(str(path), url)
        extra = f" data={dict(data)}" if data else ""
        escaped = context.base_url.replace("/", "\\/")
        return (
            f'<a href="{self.url(context.language)}">{self._key}</a>'
            f'<script>var home = "{escaped}\\/";</script>'
            f"{extra}"
        )

    def translation_exists(self, language: str | None) -> bool:
        if self.translations is None or language is None:
            return True
        return language in self.translations

    def exists(self) -> bool:
        return self._exists

    def children(self) -> Sequence[FakePage]:
        return self.child_pages

    def files(self) -> Sequence[FakeFile]:
        return self.file_list

    def reset_content(self) -> None:
        self.resets += 1

    def detach_site(self) -> None:
        self.detached += 1


class FakeRouter:
    """Router backed by a plain ``path -> result`` mapping."""

    def __init__(self, routes: Mapping[str, RouteResult] | None = None) -> None:
        self.routes = dict(routes or {})
        self.calls: list[tuple[str, str]] = []

    def resolve(self, path: str, method: str = "GET") -> RouteResult:
        self.calls.append((path, method))
        return self.routes.get(path.strip("/"), EMPTY)


class FakeSite:
    """In-memory content site recording every render-state call."""

    def __init__(
        self,
        root: Path,
        *,
        base_url: str = "",
        languages: Sequence[str] = (),
        default_language: str | None = None,
    ) -> None:
        self.root = root
        self.base_url = base_url
        self.assets_root: Path | None = None
        self.media_path = "media"
        self.router = FakeRouter()
        self._languages = tuple(languages)
        self._default_language = default_language or (languages[0] if languages else None)
        self.top_level: list[FakePage] = []
        self.pages: dict[str, FakePage] = {}
        self.plugin_files: list[PluginAsset] = []
        self.calls: list[Any] = []
        self.resets = 0

    def add_page(self, key: str, *, parent: FakePage | None = None, **kwargs: Any) -> FakePage:
        page = FakePage(self, key, **kwargs)
        self.pages[key] = page
        if parent is None:
            self.top_level.append(page)
        else:
            parent.child_pages.append(page)
        return page

    @property
    def languages(self) -> Sequence[str]:
        return self._languages

    @property
    def default_language(self) -> str | None:
        return self._default_language

    def index(self) -> Sequence[FakePage]:
        return list(self.pages.values())

    def home_page(self) -> FakePage | None:
        return self.pages.get("home")

    def find_page(self, key: str) -> FakePage | None:
        return self.pages.get(key.strip("/"))

    def placeholder_page(self) -> FakePage:
        return FakePage(self, "tabby/placeholder", exists=False)

    def plugin_assets(self) -> list[PluginAsset]:
        return list(self.plugin_files)

    def reset_collections(self) -> None:
        self.calls.append("reset_collections")

    def set_language(self, language: str | None) -> None:
        self.calls.append(("set_language", language))

    def flush_render_cache(self) -> None:
        self.calls.append("flush_render_cache")

    def visit(self, node: Any, language: str | None) -> None:
        self.calls.append(("visit", node.key, language))

    def reset_content(self) -> None:
        self.resets += 1

    def children(self) -> Sequence[FakePage]:
        return self.top_level

    def files(self) -> Sequence[FakeFile]:
        return []


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_site(tmp_path: Path) -> FakeSite:
    """A single-language site: home, about, blog, blog/first."""
    site = FakeSite(tmp_path)
    site.add_page("home")
    site.add_page("about")
    blog = site.add_page("blog")
    site.add_page("blog/first", parent=blog)
    return site


@pytest.fixture
def multilang_site(tmp_path: Path) -> FakeSite:
    """An en/de site where ``blog`` has no German translation."""
    site = FakeSite(tmp_path, languages=("en", "de"))
    site.add_page("home")
    site.add_page("about")
    site.add_page("blog", translations=("en",))
    return site


@pytest.fixture
def folder_project(tmp_path: Path) -> Path:
    """Create a minimal folder-site project for testing.

    Returns the project root with tabby.yaml, content/, templates/,
    routes/, plugins/, and assets/.
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / "tabby.yaml").write_text(
        "languages: [en, de]\n"
        "custom_routes:\n"
        "  - path: feed.xml\n"
        "    route: feed\n"
    )

    content = root / "content"
    content.mkdir()
    (content / "site.md").write_text("---\ntitle: Cats\n---\n")

    home = content / "home"
    home.mkdir()
    (home / "default.md").write_text("---\ntitle: Home\n---\n\nWelcome.\n")

    about = content / "1_about"
    about.mkdir()
    (about / "default.md").write_text("---\ntitle: About\n---\n\nAbout us.\n")
    (about / "default.de.md").write_text("---\ntitle: Über uns\n---\n\nÜber uns.\n", encoding="utf-8")
    (about / "team.jpg").write_bytes(b"\xff\xd8\xff")

    templates = root / "templates"
    templates.mkdir()
    (templates / "default.html").write_text(
        '<title>{{ page.title }}</title><a href="{{ url(\'about\') }}">about</a>'
        "{{ content }}\n"
    )
    (templates / "gallery.html").write_text(
        '<img src="{{ file_url(\'team.jpg\') }}">\n'
    )

    routes = root / "routes"
    routes.mkdir()
    (routes / "feed.py").write_text(
        'async def get(request):\n    return "<rss></rss>"\n'
    )

    plugin_assets = root / "plugins" / "lightbox" / "assets" / "css"
    plugin_assets.mkdir(parents=True)
    (plugin_assets / "lightbox.css").write_text(".lb {}\n")

    assets = root / "assets"
    assets.mkdir()
    (assets / "app.css").write_text("body { margin: 0; }\n")

    return root

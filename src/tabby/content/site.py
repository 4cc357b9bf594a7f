"""Folder site — a content tree read from a directory of page folders.

Layout::

    content/
      site.md                  # site fields (title, ...)
      home/home.md             # the home page
      1_about/default.md       # page "about", template default.html
      1_about/default.de.md    # German translation
      1_about/team.jpg         # file attached to "about"
      blog/first/article.md    # page "blog/first", template article.html

Every directory is a page.  Its key is the slash-joined folder names with
``NN_`` ordering prefixes stripped.  Text files hold YAML front matter
between ``---`` lines followed by a Markdown body.  The text file's name
picks the template; ``<name>.<code>.md`` is the translation for language
``<code>``.  Missing translations fall back to the default language text.

Pages render through Kida templates with this context:

    site        SiteView (title, url, children)
    page        PageView (key, title, url, fields, children, files)
    content     Markdown body as HTML
    data        extra data from a custom route
    lang        language code being rendered
    url(key)    URL of another page in the current language
    file_url(name)  URL of a file attached to the page

Every file URL handed to a template is reported to the render context's
media collector so the export can copy the file.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from tabby._errors import ContentError
from tabby.config import TabbyConfig
from tabby.config_loader import load_config
from tabby.content.router import SiteRouter
from tabby.routes.loader import discover_routes
from tabby.theme import find_template, get_template_dirs

if TYPE_CHECKING:
    from tabby.content.protocols import PluginAsset
    from tabby.export.context import RenderContext

HOME_KEY = "home"
DEFAULT_TEMPLATE = "default"
MEDIA_PATH = "media"

_ORDER_PREFIX = re.compile(r"^\d+_")
_TEXT_SUFFIX = ".md"
_SITE_TEXT = "site.md"


# ---------------------------------------------------------------------------
# Text files
# ---------------------------------------------------------------------------


def parse_text(path: Path) -> tuple[dict[str, Any], str]:
    """Split a text file into front matter fields and Markdown body.

    Raises:
        ContentError: If the front matter is not valid YAML or not a mapping.

    """
    raw = path.read_text(encoding="utf-8")
    if not raw.startswith("---"):
        return {}, raw

    head, sep, body = raw[3:].partition("\n---")
    if not sep:
        return {}, raw

    try:
        fields = yaml.safe_load(head) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid front matter in {path}: {exc}"
        raise ContentError(msg) from exc
    if not isinstance(fields, dict):
        msg = f"Front matter in {path} must be a mapping"
        raise ContentError(msg)

    return fields, body.removeprefix("\n")


# ---------------------------------------------------------------------------
# Content tree
# ---------------------------------------------------------------------------


class FolderFile:
    """A non-text file inside a page folder (or the content root)."""

    __slots__ = ("_fields", "name", "owner_key", "root")

    def __init__(self, root: Path, owner_key: str) -> None:
        self.root = root
        self.name = root.name
        self.owner_key = owner_key
        self._fields: dict[str, Any] | None = None

    def url(self, base_url: str) -> str:
        owner = f"pages/{self.owner_key}" if self.owner_key else "site"
        return f"{base_url.rstrip('/')}/{MEDIA_PATH}/{owner}/{self.name}"

    @property
    def fields(self) -> dict[str, Any]:
        """Fields from the optional ``<file>.yaml`` sidecar."""
        if self._fields is None:
            sidecar = self.root.with_name(self.root.name + ".yaml")
            self._fields = {}
            if sidecar.is_file():
                data = yaml.safe_load(sidecar.read_text(encoding="utf-8"))
                if isinstance(data, dict):
                    self._fields = data
        return self._fields

    def reset_content(self) -> None:
        self._fields = None


class FolderPage:
    """A page backed by a content folder."""

    def __init__(
        self,
        site: FolderSite,
        key: str,
        directory: Path | None,
        *,
        template: str = DEFAULT_TEMPLATE,
        texts: Mapping[str | None, Path] | None = None,
        exists: bool = True,
    ) -> None:
        self._site: FolderSite | None = site
        self._owner = site
        self._key = key
        self.directory = directory
        self.template = template
        self.texts: dict[str | None, Path] = dict(texts or {})
        self._exists = exists
        self._children: list[FolderPage] = []
        self._files: list[FolderFile] = []
        self._content: dict[str | None, tuple[dict[str, Any], str]] = {}

    def __repr__(self) -> str:
        return f"FolderPage({self._key!r})"

    @property
    def key(self) -> str:
        return self._key

    @property
    def slug(self) -> str:
        return self._key.rsplit("/", 1)[-1]

    @property
    def is_home(self) -> bool:
        return self._key == HOME_KEY

    @property
    def site(self) -> FolderSite:
        """The owning site, re-attached on access after ``detach_site``."""
        if self._site is None:
            self._site = self._owner
        return self._site

    def url(self, language: str | None = None) -> str:
        return self.site.page_url(self, language)

    def render(self, context: RenderContext, data: Mapping[str, Any]) -> str:
        return self.site.render_page(self, context, data)

    def translation_exists(self, language: str | None) -> bool:
        if language is None or language == self.site.default_language:
            return self._default_text() is not None
        return language in self.texts

    def exists(self) -> bool:
        return self._exists

    def children(self) -> Sequence[FolderPage]:
        return self._children

    def files(self) -> Sequence[FolderFile]:
        return self._files

    def file(self, name: str) -> FolderFile | None:
        for f in self._files:
            if f.name == name:
                return f
        return None

    def reset_content(self) -> None:
        self._content.clear()

    def detach_site(self) -> None:
        self._site = None

    def content(self, language: str | None) -> tuple[dict[str, Any], str]:
        """Return ``(fields, markdown)`` for *language*, cached until reset."""
        if language not in self._content:
            path = self.texts.get(language) or self._default_text()
            self._content[language] = parse_text(path) if path else ({}, "")
        return self._content[language]

    def title(self, language: str | None) -> str:
        fields, _ = self.content(language)
        title = fields.get("title")
        return str(title) if title else self.slug.replace("-", " ").title()

    def _default_text(self) -> Path | None:
        return self.texts.get(None) or self.texts.get(self._owner.default_language)


class FolderSite:
    """A content site loaded from ``config.content_path``.

    Args:
        config: Tabby configuration for the project.

    """

    def __init__(self, config: TabbyConfig) -> None:
        self.config = config
        self.root = config.root
        self.base_url = config.site_url
        self.assets_root: Path | None = config.assets_path if config.assets_path.is_dir() else None
        self.media_path = MEDIA_PATH

        self._languages = tuple(config.languages)
        self._default_language = config.default_language
        self._pages: dict[str, FolderPage] = {}
        self._index: list[FolderPage] = []
        self._children: list[FolderPage] = []
        self._files: list[FolderFile] = []

        self._language: str | None = self._default_language
        self._visited: FolderPage | None = None
        self._fields: dict[str, Any] | None = None
        self._collections: dict[str, Any] | None = None
        self._render_cache: dict[tuple[str, str | None], str] = {}
        self._env: Any = None
        self._markdown: Any = None

        self._discover()
        self.router = SiteRouter(
            self.find_page,
            discover_routes(config.routes_path),
            home_page=self.home_page,
        )

    @classmethod
    def load(cls, root: str | Path = ".", **overrides: object) -> FolderSite:
        """Load config from *root* (``tabby.yaml``) and the content tree."""
        return cls(load_config(Path(root), **overrides))

    # ----- content tree -----

    @property
    def languages(self) -> Sequence[str]:
        return self._languages

    @property
    def default_language(self) -> str | None:
        return self._default_language

    @property
    def language(self) -> str | None:
        """Language currently being rendered."""
        return self._language

    @property
    def visited(self) -> FolderPage | None:
        """Page currently being rendered."""
        return self._visited

    def index(self) -> Sequence[FolderPage]:
        return self._index

    def home_page(self) -> FolderPage | None:
        return self._pages.get(HOME_KEY)

    def find_page(self, key: str) -> FolderPage | None:
        return self._pages.get(key.strip("/"))

    def placeholder_page(self) -> FolderPage:
        return FolderPage(self, f"tabby/{uuid.uuid4().hex}", None, exists=False)

    def children(self) -> Sequence[FolderPage]:
        return self._children

    def files(self) -> Sequence[FolderFile]:
        return self._files

    def plugin_assets(self) -> tuple[PluginAsset, ...]:
        from tabby.plugins import discover_plugin_assets

        return discover_plugin_assets(self.config.plugins_path)

    @property
    def fields(self) -> dict[str, Any]:
        """Fields from ``content/site.md``."""
        if self._fields is None:
            text = self.config.content_path / _SITE_TEXT
            self._fields = parse_text(text)[0] if text.is_file() else {}
        return self._fields

    def page_url(self, page: FolderPage, language: str | None) -> str:
        """``<base>[/<code>]/<key>``; the home page is ``<base>[/<code>]``."""
        base = self.base_url.rstrip("/")
        prefix = "" if language in (None, self._default_language) else f"/{language}"
        if page.is_home:
            return f"{base}{prefix}" or "/"
        return f"{base}{prefix}/{page.key}"

    # ----- render state -----

    def reset_collections(self) -> None:
        self._collections = None

    def set_language(self, language: str | None) -> None:
        self._language = language

    def flush_render_cache(self) -> None:
        self._render_cache.clear()

    def visit(self, node: Any, language: str | None) -> None:
        self._visited = node
        self._language = language

    def reset_content(self) -> None:
        self._fields = None

    # ----- rendering -----

    def render_page(
        self,
        page: FolderPage,
        context: RenderContext,
        data: Mapping[str, Any],
    ) -> str:
        """Render *page* through its Kida template.

        Results without route data are cached until the render cache is
        flushed.

        """
        language = context.language
        cache_key = (page.key, language)
        if not data and cache_key in self._render_cache:
            return self._render_cache[cache_key]

        fields, body = page.content(language)
        template = self._environment().get_template(self._template_name(page))
        html = template.render(
            site=SiteView(self, language),
            page=PageView(page, language, context),
            content=self._markdown_to_html(body),
            data=dict(data),
            fields=fields,
            lang=language or "",
            url=lambda key: self._url_for(key, language),
            file_url=lambda name: _file_url(page, name, context),
        )

        if not data:
            self._render_cache[cache_key] = html
        return html

    def navigation(self, language: str | None) -> list[FolderPage]:
        """Top-level pages shown in navigation (cached collection)."""
        if self._collections is None:
            self._collections = {}
        key = f"nav:{language}"
        if key not in self._collections:
            self._collections[key] = [
                p for p in self._children
                if not p.is_home and not p.content(language)[0].get("hidden")
            ]
        return self._collections[key]

    def _url_for(self, key: str, language: str | None) -> str:
        page = self.find_page(key)
        if page is None:
            msg = f"url(): no page with key {key!r}"
            raise ContentError(msg)
        return page.url(language)

    def _template_name(self, page: FolderPage) -> str:
        name = f"{page.template}.html"
        if find_template(get_template_dirs(self.config), name) is not None:
            return name
        return f"{DEFAULT_TEMPLATE}.html"

    def _environment(self) -> Any:
        if self._env is None:
            from kida import Environment, FileSystemLoader

            self._env = Environment(
                loader=FileSystemLoader(get_template_dirs(self.config)),
                autoescape=False,
            )
        return self._env

    def _markdown_to_html(self, body: str) -> str:
        if not body.strip():
            return ""
        if self._markdown is None:
            from patitas import Markdown

            self._markdown = Markdown(plugins=["table"])
        return self._markdown(body)

    # ----- discovery -----

    def _discover(self) -> None:
        content = self.config.content_path
        if not content.is_dir():
            msg = f"Content folder {content} does not exist"
            raise ContentError(msg)

        self._files = _discover_files(content, "")
        self._children = self._discover_children(content, "")

    def _discover_children(self, directory: Path, parent_key: str) -> list[FolderPage]:
        pages: list[FolderPage] = []
        for entry in sorted(directory.iterdir()):
            if not entry.is_dir() or entry.name.startswith((".", "_")):
                continue

            slug = _ORDER_PREFIX.sub("", entry.name)
            key = f"{parent_key}/{slug}" if parent_key else slug
            if key in self._pages:
                msg = f"Duplicate page key {key!r} ({entry})"
                raise ContentError(msg)

            template, texts = self._discover_texts(entry)
            page = FolderPage(self, key, entry, template=template, texts=texts)
            page._files = _discover_files(entry, key)

            self._pages[key] = page
            self._index.append(page)
            page._children = self._discover_children(entry, key)
            pages.append(page)
        return pages

    def _discover_texts(self, directory: Path) -> tuple[str, dict[str | None, Path]]:
        template: str | None = None
        texts: dict[str | None, Path] = {}
        for text in sorted(directory.glob(f"*{_TEXT_SUFFIX}")):
            stem = text.name[: -len(_TEXT_SUFFIX)]
            name, _, code = stem.rpartition(".")
            if name and code in self._languages:
                texts[code] = text
            else:
                name = stem
                texts.setdefault(None, text)
            if template is None:
                template = name
        return template or DEFAULT_TEMPLATE, texts


def _discover_files(directory: Path, owner_key: str) -> list[FolderFile]:
    return [
        FolderFile(entry, owner_key)
        for entry in sorted(directory.iterdir())
        if entry.is_file()
        and not entry.name.startswith(".")
        and entry.suffix not in (_TEXT_SUFFIX, ".yaml")
    ]


def _file_url(page: FolderPage, name: str, context: RenderContext) -> str:
    file = page.file(name)
    if file is None:
        msg = f"file_url(): page {page.key!r} has no file {name!r}"
        raise ContentError(msg)
    url = file.url(context.base_url)
    context.record_media(str(file.root), url)
    return url


# ---------------------------------------------------------------------------
# Template views
# ---------------------------------------------------------------------------


class FileView:
    """A file as seen by templates.  Reading ``url`` records the reference."""

    __slots__ = ("_context", "_file")

    def __init__(self, file: FolderFile, context: RenderContext) -> None:
        self._file = file
        self._context = context

    @property
    def name(self) -> str:
        return self._file.name

    @property
    def fields(self) -> dict[str, Any]:
        return self._file.fields

    @property
    def url(self) -> str:
        url = self._file.url(self._context.base_url)
        self._context.record_media(str(self._file.root), url)
        return url


class PageView:
    """A page as seen by templates, bound to one language."""

    __slots__ = ("_context", "_language", "_page")

    def __init__(self, page: FolderPage, language: str | None, context: RenderContext) -> None:
        self._page = page
        self._language = language
        self._context = context

    @property
    def key(self) -> str:
        return self._page.key

    @property
    def title(self) -> str:
        return self._page.title(self._language)

    @property
    def url(self) -> str:
        return self._page.url(self._language)

    @property
    def fields(self) -> dict[str, Any]:
        return self._page.content(self._language)[0]

    @property
    def is_current(self) -> bool:
        return self._context.node is self._page

    @property
    def children(self) -> list[PageView]:
        return [PageView(p, self._language, self._context) for p in self._page.children()]

    @property
    def files(self) -> list[FileView]:
        return [FileView(f, self._context) for f in self._page.files()]


class SiteView:
    """The site as seen by templates."""

    __slots__ = ("_language", "_site")

    def __init__(self, site: FolderSite, language: str | None) -> None:
        self._site = site
        self._language = language

    @property
    def title(self) -> str:
        return str(self._site.fields.get("title", ""))

    @property
    def url(self) -> str:
        home = self._site.home_page()
        if home is not None:
            return home.url(self._language)
        return self._site.base_url or "/"

    @property
    def children(self) -> list[dict[str, str]]:
        return [
            {"key": p.key, "title": p.title(self._language), "url": p.url(self._language)}
            for p in self._site.navigation(self._language)
        ]

"""Interfaces between the exporter and the content it exports.

The exporter never loads or renders content itself.  It drives a
``ContentSite`` (the content tree, its language state and render caches),
asks the site's ``Router`` to resolve custom routes, and copies the assets
the site's plugins bundle.  ``tabby.content.site.FolderSite`` is the
bundled implementation; anything that satisfies these protocols can be
exported.

Router results are a small tagged union::

    NodeResult(node)   # the path is a page
    TextResult(text)   # the path produced a literal body (feed, JSON, ...)
    EMPTY              # nothing lives at the path
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tabby.export.context import RenderContext


# ---------------------------------------------------------------------------
# Route results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NodeResult:
    """A route resolved to a page."""

    node: ContentNode


@dataclass(frozen=True, slots=True)
class TextResult:
    """A route resolved to a literal response body."""

    text: str


@dataclass(frozen=True, slots=True)
class EmptyResult:
    """A route resolved to nothing."""


EMPTY = EmptyResult()

type RouteResult = NodeResult | TextResult | EmptyResult


# ---------------------------------------------------------------------------
# Plugin assets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PluginAsset:
    """A file bundled by a plugin.

    Attributes:
        root: Absolute path to the source file.
        path: Path relative to the plugin's asset folder (``css/app.css``).
        plugin_name: Name of the plugin that ships the file.

    """

    root: Path
    path: str
    plugin_name: str


# ---------------------------------------------------------------------------
# Content tree
# ---------------------------------------------------------------------------


@runtime_checkable
class ContentFile(Protocol):
    """A file attached to a page or the site."""

    def reset_content(self) -> None:
        """Drop cached (possibly translated) metadata."""


@runtime_checkable
class ContentNode(Protocol):
    """A page in the content tree."""

    @property
    def key(self) -> str:
        """Stable identifier, unique within the site."""

    @property
    def is_home(self) -> bool: ...

    def url(self, language: str | None = None) -> str:
        """Absolute URL of the page under the site's current base."""

    def render(self, context: RenderContext, data: Mapping[str, Any]) -> str:
        """Render the page to markup."""

    def translation_exists(self, language: str | None) -> bool: ...

    def exists(self) -> bool:
        """Whether the page is part of the content tree (not synthesized)."""

    def children(self) -> Sequence[ContentNode]: ...

    def files(self) -> Sequence[ContentFile]: ...

    def reset_content(self) -> None:
        """Drop cached content so the next render reads it fresh."""

    def detach_site(self) -> None:
        """Drop any cached association with a site instance."""


@runtime_checkable
class Router(Protocol):
    """Resolves an arbitrary path to a page or a literal body."""

    def resolve(self, path: str, method: str = "GET") -> RouteResult: ...


@runtime_checkable
class ContentSite(Protocol):
    """The site root: content tree, language state, and render caches."""

    base_url: str
    root: Path
    assets_root: Path | None
    media_path: str
    router: Router

    @property
    def languages(self) -> Sequence[str]:
        """Configured language codes; empty for single-language sites."""

    @property
    def default_language(self) -> str | None: ...

    def index(self) -> Sequence[ContentNode]:
        """Every page in the tree, parents before children."""

    def home_page(self) -> ContentNode | None: ...

    def find_page(self, key: str) -> ContentNode | None: ...

    def placeholder_page(self) -> ContentNode:
        """A synthetic page used to render literal route output."""

    def plugin_assets(self) -> Iterable[PluginAsset]: ...

    def reset_collections(self) -> None:
        """Drop cached per-request collections."""

    def set_language(self, language: str | None) -> None:
        """Set the current translation and language."""

    def flush_render_cache(self) -> None: ...

    def visit(self, node: ContentNode, language: str | None) -> None:
        """Mark *node* as the page currently being rendered."""

    def reset_content(self) -> None: ...

    def children(self) -> Sequence[ContentNode]: ...

    def files(self) -> Sequence[ContentFile]: ...

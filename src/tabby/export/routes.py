"""Custom routes — outputs that do not come from walking the content tree.

A custom route names an output path and where its content comes from::

    RouteSpec(path="feed.xml", route="blog/feed")        # router output
    RouteSpec(path="en/landing", page="landing")          # a specific page
    RouteSpec(path="print/about", page="about",
              data={"print": True}, language="de")        # page + data

Config files use the mapping form (``path``, ``page``, ``route``,
``baseUrl``/``base_url``, ``data``, ``languageCode``/``language``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from tabby._errors import ConfigError
from tabby.content.protocols import NodeResult, TextResult

if TYPE_CHECKING:
    from tabby.content.protocols import ContentNode, ContentSite


@dataclass(frozen=True, slots=True)
class RouteSpec:
    """A caller-declared output.

    Attributes:
        path: Output path relative to the output folder (``feed.xml``).
        page: Page (or page key) to render; takes precedence over routing.
        route: Router path to resolve; defaults to ``path``.
        base_url: Final base URL for this output (default: the run's).
        data: Extra data passed to the page's render call.
        language: Language to render in.

    """

    path: str = ""
    page: ContentNode | str | None = None
    route: str | None = None
    base_url: str | None = None
    data: Mapping[str, Any] = field(default_factory=dict)
    language: str | None = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> RouteSpec:
        """Build a RouteSpec from its config-file form.

        Raises:
            ConfigError: If ``data`` is not a mapping.

        """
        data = mapping.get("data") or {}
        if not isinstance(data, Mapping):
            msg = f"Custom route {mapping.get('path')!r}: 'data' must be a mapping"
            raise ConfigError(msg)

        return cls(
            path=str(mapping.get("path") or ""),
            page=mapping.get("page"),
            route=mapping.get("route"),
            base_url=mapping.get("baseUrl", mapping.get("base_url")),
            data=dict(data),
            language=mapping.get("languageCode", mapping.get("language")),
        )


def coerce_route(route: RouteSpec | Mapping[str, Any]) -> RouteSpec:
    """Accept either form of a custom route."""
    if isinstance(route, RouteSpec):
        return route
    return RouteSpec.from_mapping(route)


def resolve_route(
    spec: RouteSpec,
    site: ContentSite,
) -> tuple[ContentNode | None, str | None]:
    """Find the content for *spec*.

    Returns:
        ``(node, text)`` where *text* is the literal body produced by the
        router, if any.  ``(None, None)`` means there is nothing to write.

    """
    page = spec.page
    if isinstance(page, str):
        page = site.find_page(page)
    if page is not None:
        return page, None

    route_path = spec.route or spec.path
    if not route_path:
        return None, None

    match site.router.resolve(route_path, "GET"):
        case NodeResult(node=node):
            return node, None
        case TextResult(text=text):
            return None, text
        case _:
            return None, None

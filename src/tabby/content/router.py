"""Site router — resolves paths to pages or route module output.

Custom routes name a path; the router decides what lives there.  Route
modules from ``routes/`` take precedence, then pages by key.

    router.resolve("/feed.xml")   -> TextResult("<?xml ...")
    router.resolve("/about")      -> NodeResult(<page about>)
    router.resolve("/missing")    -> EMPTY
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from tabby._errors import ContentError
from tabby.content.protocols import (
    EMPTY,
    ContentNode,
    EmptyResult,
    NodeResult,
    TextResult,
)
from tabby.routes.loader import RouteRequest

if TYPE_CHECKING:
    from tabby.content.protocols import RouteResult
    from tabby.routes.loader import RouteDefinition


class SiteRouter:
    """Routes paths to route module handlers or pages.

    Args:
        find_page: Looks up a page by key (``"blog/first-post"``).
        definitions: Discovered route definitions.
        home_page: Returns the home page, used for ``/``.

    """

    def __init__(
        self,
        find_page: Callable[[str], ContentNode | None],
        definitions: Sequence[RouteDefinition] = (),
        *,
        home_page: Callable[[], ContentNode | None] | None = None,
    ) -> None:
        self._find_page = find_page
        self._definitions = tuple(definitions)
        self._home_page = home_page

    @property
    def definitions(self) -> tuple[RouteDefinition, ...]:
        return self._definitions

    def resolve(self, path: str, method: str = "GET") -> RouteResult:
        """Resolve *path* for *method*.

        Raises:
            ContentError: If a route handler returns an unsupported value.

        """
        for defn in self._definitions:
            params = defn.match(path, method)
            if params is None:
                continue
            request = RouteRequest(path="/" + path.strip("/"), method=method.upper(), params=params)
            return _to_result(_call(defn.handler, request), defn)

        key = path.strip("/")
        if not key:
            page = self._home_page() if self._home_page is not None else None
        else:
            page = self._find_page(key)
        return NodeResult(page) if page is not None else EMPTY


def _call(handler: Any, request: RouteRequest) -> object:
    result = handler(request)
    if inspect.isawaitable(result):
        return asyncio.run(_await(result))
    return result


async def _await(awaitable: Any) -> object:
    return await awaitable


def _to_result(value: object, defn: RouteDefinition) -> RouteResult:
    """Map a handler's return value onto a route result."""
    if value is None:
        return EMPTY
    if isinstance(value, (NodeResult, TextResult, EmptyResult)):
        return value
    if isinstance(value, str):
        return TextResult(value)
    if isinstance(value, (bytes, bytearray)):
        return TextResult(bytes(value).decode("utf-8"))
    if isinstance(value, ContentNode):
        return NodeResult(value)

    body = getattr(value, "body", None)
    if isinstance(body, (bytes, bytearray)):
        return TextResult(bytes(body).decode("utf-8"))
    if isinstance(body, str):
        return TextResult(body)

    msg = (
        f"Route handler {defn.name!r} in {defn.source} returned "
        f"{type(value).__name__}; expected str, bytes, a response with a "
        "body, or a page."
    )
    raise ContentError(msg)

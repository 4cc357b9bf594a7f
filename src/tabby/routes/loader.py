"""Route loader — route modules that produce custom outputs.

Every ``*.py`` file below ``routes/`` serves one path, derived from its
location unless the module sets ``path``::

    routes/feed.py           -> /feed
    routes/blog/rss.py       -> /blog/rss
    routes/sitemap.py        -> path = "/sitemap.xml"

An export only ever issues GET requests, so a module is asked for a single
coroutine function: ``get(request)``, or ``handler(request)`` when there is
no ``get``.  The handler returns the response body (``str``, ``bytes``, or
an object with a ``body`` attribute), a page, or a route result.  Paths may
contain ``{name}`` placeholders, available as ``request.params["name"]``.
"""

from __future__ import annotations

import importlib.util
import inspect
import re
import sys
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType

from tabby._errors import ConfigError

# Function names looked up in a route module, in priority order
_HANDLER_NAMES = ("get", "handler")

# Module namespace for imported route files
_MODULE_PREFIX = "tabby_routes"

_PLACEHOLDER = re.compile(r"\{([a-zA-Z_][a-zA-Z0-9_]*)\}")


@dataclass(frozen=True, slots=True)
class RouteRequest:
    """What a route handler receives.

    Attributes:
        path: Requested path, normalized to start with ``/``.
        method: Request method (always ``GET`` during export).
        params: Values captured by ``{name}`` placeholders.

    """

    path: str
    method: str = "GET"
    params: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RouteDefinition:
    """A path served by a route module.

    Attributes:
        path: URL pattern (``/feed``, ``/blog/{tag}/rss``).
        handler: Coroutine function called with a ``RouteRequest``.
        methods: Request methods served.
        name: Label used in error messages.
        source: The module file the route came from.

    """

    path: str
    handler: object
    methods: tuple[str, ...]
    name: str
    source: Path

    def match(self, path: str, method: str = "GET") -> dict[str, str] | None:
        """Return captured params if *path* and *method* match, else *None*."""
        if method.upper() not in self.methods:
            return None
        found = _compile_path(self.path).fullmatch(_normalize(path))
        return None if found is None else found.groupdict()


def discover_routes(routes_dir: Path) -> tuple[RouteDefinition, ...]:
    """Import every route module below *routes_dir*.

    Modules without a handler are ignored.  A missing *routes_dir* yields
    no routes.

    Raises:
        ConfigError: If a module fails to import, declares an invalid
            ``path`` or handler, or two modules serve the same path.

    """
    if not routes_dir.is_dir():
        return ()

    owners: dict[str, Path] = {}
    found: list[RouteDefinition] = []
    for py_file in _route_files(routes_dir):
        module = _import_route_module(py_file, routes_dir)
        defn = _definition_for(module, py_file, routes_dir)
        if defn is None:
            continue

        previous = owners.setdefault(defn.path, py_file)
        if previous != py_file:
            msg = f"Route path {defn.path!r} is served by both {previous} and {py_file}"
            raise ConfigError(msg)
        found.append(defn)

    return tuple(found)


def _route_files(routes_dir: Path) -> Iterator[Path]:
    """Yield route module files, skipping private names and caches."""
    for py_file in sorted(routes_dir.rglob("*.py")):
        relative = py_file.relative_to(routes_dir)
        if any(part.startswith("_") for part in relative.parts):
            continue
        yield py_file


def _import_route_module(py_file: Path, routes_dir: Path) -> ModuleType:
    """Execute *py_file* as ``tabby_routes.<dotted relative path>``."""
    dotted = ".".join(py_file.relative_to(routes_dir).with_suffix("").parts)
    module_name = f"{_MODULE_PREFIX}.{dotted}"

    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        msg = f"Cannot import route module {py_file}"
        raise ConfigError(msg)

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        del sys.modules[module_name]
        msg = f"Failed to load route module {py_file}: {exc}"
        raise ConfigError(msg) from exc
    return module


def _definition_for(
    module: ModuleType,
    py_file: Path,
    routes_dir: Path,
) -> RouteDefinition | None:
    handler = next(
        (fn for fn in (getattr(module, n, None) for n in _HANDLER_NAMES) if callable(fn)),
        None,
    )
    if handler is None:
        return None
    _check_handler(handler, py_file)

    declared = getattr(module, "path", None)
    if declared is not None and not isinstance(declared, str):
        msg = f"Route module {py_file}: 'path' must be a str, got {type(declared).__name__}"
        raise ConfigError(msg)
    path = _normalize(declared if declared is not None else _derive_path(py_file, routes_dir))

    return RouteDefinition(
        path=path,
        handler=handler,
        methods=("GET",),
        name=str(getattr(module, "name", None) or path),
        source=py_file,
    )


def _check_handler(handler: object, source: Path) -> None:
    """Require ``async def name(request)``.

    Raises:
        ConfigError: If *handler* is not a coroutine function or takes no
            arguments.

    """
    label = getattr(handler, "__name__", "handler")
    if not inspect.iscoroutinefunction(handler):
        msg = f"Route handler {label!r} in {source} must be declared with 'async def'."
        raise ConfigError(msg)
    if not inspect.signature(handler).parameters:  # type: ignore[arg-type]
        msg = f"Route handler {label!r} in {source} must take the request as its argument."
        raise ConfigError(msg)


def _derive_path(py_file: Path, routes_dir: Path) -> str:
    """``routes/blog/rss.py`` -> ``/blog/rss``."""
    return "/" + py_file.relative_to(routes_dir).with_suffix("").as_posix()


def _normalize(path: str) -> str:
    return "/" + path.strip("/")


def _compile_path(path: str) -> re.Pattern[str]:
    """Turn ``/blog/{tag}/rss`` into a regex capturing ``tag``."""
    normalized = _normalize(path)
    pieces: list[str] = []
    last = 0
    for found in _PLACEHOLDER.finditer(normalized):
        pieces.append(re.escape(normalized[last:found.start()]))
        pieces.append(f"(?P<{found.group(1)}>[^/]+)")
        last = found.end()
    pieces.append(re.escape(normalized[last:]))
    return re.compile("".join(pieces))

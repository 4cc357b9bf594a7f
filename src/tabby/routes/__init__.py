"""Route module discovery and loading.

Scans a ``routes/`` directory for Python modules, imports them, and extracts
route definitions using file-path convention with optional explicit overrides.

Public API::

    from tabby.routes import discover_routes

    definitions = discover_routes(Path("my-site/routes"))
"""

from tabby.routes.loader import RouteDefinition, RouteRequest, discover_routes

__all__ = [
    "RouteDefinition",
    "RouteRequest",
    "discover_routes",
]

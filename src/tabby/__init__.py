"""Tabby — export a content site as static files.

Renders every page of a content tree (in every configured language, plus
custom routes such as feeds), rewrites render-time URLs to the base the
files will be served from, and copies media, plugin assets and global
assets alongside.

Quick start::

    import tabby

    tabby.build("my-site/")                       # tabby.yaml + content/

Programmatic use::

    from tabby import StaticSiteGenerator
    from tabby.content import FolderSite

    site = FolderSite.load("my-site/")
    manifest = (
        StaticSiteGenerator(site)
        .set_custom_routes([{"path": "feed.xml", "route": "feed"}])
        .generate("./static", "https://example.com/")
    )

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "StaticSiteGenerator",
    "TabbyConfig",
    "__version__",
    "build",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import tabby`` fast (no content or template stack loaded).
    """
    if name == "TabbyConfig":
        from tabby.config import TabbyConfig

        return TabbyConfig

    if name == "StaticSiteGenerator":
        from tabby.export.static import StaticSiteGenerator

        return StaticSiteGenerator

    if name == "build":
        from tabby.app import build

        return build

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

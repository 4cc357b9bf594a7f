"""Tabby configuration.

TabbyConfig is the central configuration object, frozen after creation.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_INDEX_FILE_NAME = "index.html"

_INDEX_FILE_INVALID = re.compile(r"[^a-z0-9.]", re.IGNORECASE)


def sanitize_index_file_name(name: str) -> str | None:
    """Strip everything but ASCII letters, digits and dots from *name*.

    Returns *None* when nothing but dots would remain, so callers can keep
    their previous value.

    ``"index.html"``    -> ``"index.html"``
    ``"in dex.htm!"``   -> ``"index.htm"``
    ``"../"``           -> ``None``

    """
    cleaned = _INDEX_FILE_INVALID.sub("", name or "")
    if not cleaned.replace(".", ""):
        return None
    return cleaned


@dataclass(frozen=True, slots=True)
class TabbyConfig:
    """Configuration for a Tabby export.

    Attributes:
        root: Path to the project root (contains content/, templates/, etc.).
              Always resolved to an absolute path on construction.
        output: Output folder for the static export.
        base_url: Base URL the exported files are served from.
        site_url: Base URL the site is configured with while rendering.
            Empty means a private render-time base is used during export.
        paths_to_copy: Extra files or folders copied into the output.
            Empty means the site's assets folder.
        preserve: Top-level output entries never erased before a run.
        skip_media: Do not copy media files referenced by rendered pages.
        skip_plugin_assets: Do not copy assets bundled by plugins.
        ignore_untranslated_pages: Skip pages lacking a translation for
            the language being exported.
        index_file_name: File name written for every page folder.
        custom_routes: Extra outputs (``path``, ``page``, ``route``,
            ``base_url``, ``data``, ``language``), one mapping each.
        languages: Configured language codes (empty = single language).
        default_language: Language whose URLs carry no prefix.
        content_dir: Directory containing page folders.
        templates_dir: Directory containing Kida templates.
        routes_dir: Directory containing route modules.
        plugins_dir: Directory containing plugins with bundled assets.
        assets_dir: Directory containing global assets.

    """

    root: Path = field(default_factory=Path.cwd)
    output: Path = field(default_factory=lambda: Path("static"))
    base_url: str = "/"
    site_url: str = ""
    paths_to_copy: tuple[str, ...] = ()
    preserve: tuple[str, ...] = ()
    skip_media: bool = False
    skip_plugin_assets: bool = False
    ignore_untranslated_pages: bool = False
    index_file_name: str = DEFAULT_INDEX_FILE_NAME
    custom_routes: tuple[dict[str, Any], ...] = ()
    languages: tuple[str, ...] = ()
    default_language: str | None = None
    content_dir: str = "content"
    templates_dir: str = "templates"
    routes_dir: str = "routes"
    plugins_dir: str = "plugins"
    assets_dir: str = "assets"

    def __post_init__(self) -> None:
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        index = sanitize_index_file_name(self.index_file_name)
        object.__setattr__(self, "index_file_name", index or DEFAULT_INDEX_FILE_NAME)
        if self.languages and self.default_language is None:
            object.__setattr__(self, "default_language", self.languages[0])

    @property
    def content_path(self) -> Path:
        """Absolute path to content directory."""
        return self.root / self.content_dir

    @property
    def templates_path(self) -> Path:
        """Absolute path to templates directory."""
        return self.root / self.templates_dir

    @property
    def routes_path(self) -> Path:
        """Absolute path to route modules directory."""
        return self.root / self.routes_dir

    @property
    def plugins_path(self) -> Path:
        """Absolute path to plugins directory."""
        return self.root / self.plugins_dir

    @property
    def assets_path(self) -> Path:
        """Absolute path to global assets directory."""
        return self.root / self.assets_dir

    @property
    def output_path(self) -> Path:
        """Absolute path to output directory."""
        if self.output.is_absolute():
            return self.output
        return self.root / self.output

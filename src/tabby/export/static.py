"""Static export — render a content site into a folder of static files.

Every page is rendered once per configured language, plus the home page
(to the output root) and any custom routes.  Pages are rendered while the
site lives at a render-time base URL; before each file is written that
base is rewritten to the URL the export will be served from, so links
inside the output resolve to the exported files.

Referenced media, extra paths (global assets) and plugin assets are
copied alongside.  The output folder is checked before it is erased
(see ``tabby.export.folder``) and every written path is collected in the
run's ``Manifest``.

Rendering mutates shared site state (current language, visited page,
caches), so the pipeline is strictly sequential.
"""

from __future__ import annotations

import os
import time
import uuid
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

from tabby._errors import ConfigError, RenderError
from tabby.config import TabbyConfig, sanitize_index_file_name
from tabby.export.context import RenderContext, switch_language
from tabby.export.copier import FileCopier
from tabby.export.folder import check_output_folder, write_marker
from tabby.export.folder import clear_folder as _clear_folder
from tabby.export.media import MediaCollector, media_collector
from tabby.export.paths import clean_path, resolve, resolve_many
from tabby.export.rewrite import rewrite_urls
from tabby.export.routes import RouteSpec, coerce_route, resolve_route
from tabby.observability.collector import BuildCollector

if TYPE_CHECKING:
    from tabby.content.protocols import ContentNode, ContentSite

# Prefix of the private base URL installed while rendering a site whose
# base URL has no host.  A random suffix is added per run.
RENDER_BASE_PREFIX = "https://tabby-render-"


class Manifest:
    """Deduplicated, insertion-ordered set of generated file paths."""

    __slots__ = ("_paths",)

    def __init__(self, paths: Iterable[str] = ()) -> None:
        self._paths: dict[str, None] = dict.fromkeys(paths)

    def add(self, path: str) -> None:
        self._paths[path] = None

    def update(self, paths: Iterable[str]) -> None:
        for path in paths:
            self._paths[path] = None

    def paths(self) -> tuple[str, ...]:
        return tuple(self._paths)

    def clear(self) -> None:
        self._paths.clear()

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._paths))

    def __len__(self) -> int:
        return len(self._paths)

    def __repr__(self) -> str:
        return f"Manifest({len(self._paths)} files)"


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Aggregate result of a full static export.

    Attributes:
        files: Every file written or copied, in order.
        total_pages: Number of distinct rendered output files.
        total_assets: Number of copied files.
        errors: Messages of non-fatal failures (removals, copies).
        duration_ms: Total wall-clock time for the export.
        output_dir: Absolute path to the output directory.

    """

    files: tuple[str, ...]
    total_pages: int
    total_assets: int
    errors: tuple[str, ...]
    duration_ms: float
    output_dir: Path


class StaticSiteGenerator:
    """Exports a content site as static files.

    Args:
        site: The content site to export.
        config: Export configuration (defaults rooted at ``site.root``).
        paths_to_copy: Files or folders copied into the output after
            rendering.  Defaults to ``config.paths_to_copy``, then to the
            site's assets folder.  ``./``-relative paths resolve against
            the project root.
        pages: Pages to export (default: every page of the site).
        media: Collector for media references (default: the process-wide
            ``media_collector``).
        events: Collector for build events.

    """

    def __init__(
        self,
        site: ContentSite,
        config: TabbyConfig | None = None,
        *,
        paths_to_copy: Sequence[str | os.PathLike[str]] | None = None,
        pages: Sequence[ContentNode] | None = None,
        media: MediaCollector | None = None,
        events: BuildCollector | None = None,
    ) -> None:
        self._site = site
        self._config = config if config is not None else TabbyConfig(root=Path(site.root))
        self._root = str(self._config.root)

        if paths_to_copy is None:
            paths_to_copy = self._config.paths_to_copy or (
                [site.assets_root] if site.assets_root is not None else []
            )
        self._paths_to_copy = resolve_many(paths_to_copy, self._root)
        self._output_folder = resolve(self._config.output_path, self._root)

        self._pages = list(pages) if pages is not None else list(site.index())
        self._default_language = site.default_language
        self._languages: list[str | None] = list(site.languages) or [None]

        self._skip_media = self._config.skip_media
        self._skip_plugin_assets = self._config.skip_plugin_assets
        self._ignore_untranslated_pages = self._config.ignore_untranslated_pages
        self._index_file_name = self._config.index_file_name
        self._custom_routes = [coerce_route(r) for r in self._config.custom_routes]

        self._media = media if media is not None else media_collector
        self._events = events if events is not None else BuildCollector()
        self._manifest = Manifest()
        self._rendered = Manifest()
        self._render_base = ""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def output_folder(self) -> str:
        """Absolute path of the output folder."""
        return self._output_folder

    @property
    def manifest(self) -> Manifest:
        """Files written or copied so far."""
        return self._manifest

    @property
    def events(self) -> BuildCollector:
        return self._events

    @property
    def index_file_name(self) -> str:
        return self._index_file_name

    @property
    def render_base(self) -> str:
        """Render-time base URL of the current (or last) run."""
        return self._render_base

    def generate(
        self,
        output_folder: str | os.PathLike[str] | None = None,
        base_url: str | None = None,
        preserve: Iterable[str] | None = None,
    ) -> Manifest:
        """Run the full export and return the manifest.

        Pipeline order:
            1. Check the output folder and custom route paths
               (nothing is touched if this fails)
            2. Write the marker file, erase the folder
            3. Render home page, pages per language, custom routes
            4. Copy media and plugin assets
            5. Copy extra paths (global assets)

        Raises:
            ConfigurationError: If no usable output folder is given, or a
                custom route path leaves the output folder.
            OutputPermissionError: If the output folder is not writable.
            UnsafeOverwriteError: If the output folder was not created by tabby.
            RenderError: If a page fails to render.

        """
        folder = output_folder if output_folder else self._config.output_path
        self._output_folder = resolve(folder, self._root)
        check_output_folder(self._output_folder, self._index_file_name)
        for route in self._custom_routes:
            if route.path:
                self._output_path(route.path)
        write_marker(self._output_folder)

        self._manifest.clear()
        self._rendered.clear()

        keep = self._config.preserve if preserve is None else preserve
        self.clear_folder(self._output_folder, keep)
        self.generate_pages(self._config.base_url if base_url is None else base_url)
        for path in self._paths_to_copy:
            self.copy_files(path)

        return self._manifest

    def export(
        self,
        output_folder: str | os.PathLike[str] | None = None,
        base_url: str | None = None,
        preserve: Iterable[str] | None = None,
    ) -> ExportResult:
        """Run :meth:`generate` and summarize the run."""
        start = time.perf_counter()
        errors_before = len(self._events.errors())

        manifest = self.generate(output_folder, base_url, preserve)

        elapsed = (time.perf_counter() - start) * 1000
        errors = self._events.errors()[errors_before:]
        total_pages = len(self._rendered)
        return ExportResult(
            files=manifest.paths(),
            total_pages=total_pages,
            total_assets=len(manifest) - total_pages,
            errors=tuple(f"{e.source}: {e.message}" for e in errors),
            duration_ms=elapsed,
            output_dir=Path(self._output_folder),
        )

    def generate_pages(self, base_url: str = "/") -> Manifest:
        """Render every page and custom route into the output folder.

        Media referenced while rendering and plugin assets are copied
        afterwards, unless disabled.

        Raises:
            RenderError: If a page fails to render.

        """
        restore_base = self._install_render_base()
        base_url = base_url.rstrip("/") + "/"

        copy_media = not self._skip_media
        if copy_media:
            self._media.clear()
            self._media.activate()

        try:
            home = self._site.home_page()
            if home is not None:
                context = self._switch(home, self._default_language)
                self._generate_page(
                    home,
                    f"{self._output_folder}/{self._index_file_name}",
                    base_url,
                    context,
                )

            for language in self._languages:
                self._generate_pages_by_language(base_url, language)

            for route in self._custom_routes:
                self._generate_custom_route(base_url, route)

            if copy_media:
                self._copier().copy_media(self._media.drain(), self._render_base)

            if not self._skip_plugin_assets:
                self._copier().copy_plugin_assets(
                    self._site.plugin_assets(), self._site.media_path,
                )
        finally:
            if copy_media:
                self._media.deactivate()
                self._media.clear()
            if restore_base is not None:
                self._site.base_url = restore_base

        return self._manifest

    def copy_files(self, path: str | os.PathLike[str] | None = None) -> Manifest:
        """Copy a file or folder into the output folder."""
        return self._copier().copy(os.fspath(path) if path else None)

    def clear_folder(self, folder: str | os.PathLike[str], preserve: Iterable[str] = ()) -> bool:
        """Erase *folder* except dot-files and *preserve* (best effort)."""
        return _clear_folder(resolve(folder, self._root), preserve, events=self._events)

    def skip_media(self, skip: bool = True) -> StaticSiteGenerator:
        self._skip_media = skip
        return self

    def skip_plugin_assets(self, skip: bool = True) -> StaticSiteGenerator:
        self._skip_plugin_assets = skip
        return self

    def set_custom_routes(
        self,
        routes: Iterable[RouteSpec | Mapping[str, Any]],
    ) -> StaticSiteGenerator:
        self._custom_routes = [coerce_route(r) for r in routes]
        return self

    def set_ignore_untranslated_pages(self, ignore: bool) -> StaticSiteGenerator:
        self._ignore_untranslated_pages = ignore
        return self

    def set_index_file_name(self, name: str) -> StaticSiteGenerator:
        """Set the file name written for page folders.

        Characters other than letters, digits and dots are stripped; a
        name with nothing but dots left is ignored.
        """
        sanitized = sanitize_index_file_name(name)
        if sanitized is not None:
            self._index_file_name = sanitized
        return self

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    def _install_render_base(self) -> str | None:
        """Make sure the site renders under a base URL that can be rewritten.

        A base without a host (``""``, ``/``, ``/sub``) cannot be told apart
        from ordinary paths in rendered text, so the site gets a private
        render base instead.  Returns the base URL to restore afterwards, or
        *None* if the site's own base URL is used.

        """
        original = self._site.base_url
        if urlsplit(original).netloc:
            self._render_base = original
            return None

        self._render_base = f"{RENDER_BASE_PREFIX}{uuid.uuid4().hex[:12]}"
        self._site.base_url = self._render_base
        return original

    def _generate_pages_by_language(self, base_url: str, language: str | None) -> None:
        for page in self._pages:
            if self._ignore_untranslated_pages and not page.translation_exists(language):
                continue

            context = self._switch(page, language)
            relative = page.url(language).replace(self._render_base, "/")
            self._generate_page(page, self._output_path(relative), base_url, context)

    def _generate_custom_route(self, base_url: str, route: RouteSpec) -> None:
        page, content = resolve_route(route, self._site)
        if not route.path or (page is None and not content):
            return

        if page is None:
            page = self._site.placeholder_page()

        if route.base_url:
            base_url = route.base_url.rstrip("/") + "/"

        context = self._switch(page, route.language)
        self._generate_page(
            page,
            self._output_path(route.path),
            base_url,
            context,
            data=route.data,
            content=content or None,
        )

    def _generate_page(
        self,
        page: ContentNode,
        path: str,
        base_url: str,
        context: RenderContext,
        *,
        data: Mapping[str, Any] | None = None,
        content: str | None = None,
    ) -> None:
        """Render *page* (unless *content* is given), rewrite URLs, write *path*.

        Raises:
            RenderError: If the page's render call raises.

        """
        t0 = time.perf_counter()
        page.detach_site()

        if content is None:
            try:
                content = page.render(context, data or {})
            except Exception as exc:
                raise self._render_error(exc, page.key, context.language) from exc

        content = rewrite_urls(content, self._render_base, base_url)
        self._write_file(Path(path), content)

        self._manifest.add(path)
        self._rendered.add(path)
        elapsed = (time.perf_counter() - t0) * 1000
        self._events.record_build(
            "render", page.key, path,
            duration_ms=elapsed, language=context.language,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _switch(self, page: ContentNode, language: str | None) -> RenderContext:
        return switch_language(
            self._site,
            page,
            language,
            media=None if self._skip_media else self._media,
        )

    def _copier(self) -> FileCopier:
        return FileCopier(
            self._output_folder,
            self._manifest,
            self._events,
            index_file_name=self._index_file_name,
        )

    def _output_path(self, relative: str) -> str:
        """Map a site-relative path to its file in the output folder.

        ``/about``     -> ``<output>/about/index.html``
        ``feed.xml``   -> ``<output>/feed.xml``

        Raises:
            ConfigError: If the path resolves outside the output folder.

        """
        cleaned = clean_path(f"/{relative}/{self._index_file_name}", self._index_file_name)
        target = self._output_folder + cleaned
        folder = os.path.normpath(self._output_folder)
        if os.path.commonpath([folder, os.path.normpath(target)]) != folder:
            msg = f"Output path {relative!r} resolves outside the output folder {folder}"
            raise ConfigError(msg)
        return target

    def _render_error(
        self,
        exc: BaseException,
        key: str,
        language: str | None,
    ) -> RenderError:
        """Attribute a render failure to its source location and page."""
        filename, lineno = _extract_error_location(exc)
        if filename.startswith(self._root + os.sep):
            filename = filename[len(self._root):]

        where = f"Error in {filename} line {lineno}" if filename else "Error"
        lang = f" ({language})" if language else ""
        msg = f'{where} while rendering page "{key}"{lang}: {exc}'
        return RenderError(msg, key=key, language=language, file=filename, line=lineno)

    @staticmethod
    def _write_file(filepath: Path, content: str) -> int:
        """Write *content* as UTF-8, creating parent dirs as needed.

        Returns the size in bytes of the written file.

        """
        filepath.parent.mkdir(parents=True, exist_ok=True)
        data = content.encode("utf-8")
        filepath.write_bytes(data)
        return len(data)


def _extract_error_location(exc: BaseException) -> tuple[str, int]:
    """Return the most relevant filename and line number for *exc*.

    Template errors that carry their own location (``filename`` and
    ``lineno`` attributes) win over the innermost traceback frame.
    """
    filename = getattr(exc, "filename", None)
    lineno = getattr(exc, "lineno", None)
    if isinstance(filename, str) and filename and isinstance(lineno, int):
        return filename, lineno

    tb = exc.__traceback__
    if tb is None:
        return "", 0

    while tb.tb_next is not None:
        tb = tb.tb_next

    return tb.tb_frame.f_code.co_filename, tb.tb_lineno

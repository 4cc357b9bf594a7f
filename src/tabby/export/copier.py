"""File copying into the export output.

Copies single files, whole folders (global assets, extra paths), media
referenced by rendered pages, and plugin assets.  Every file that lands in
the output is added to the run's manifest.

Copying is best effort: a failure is reported on stderr and recorded as an
``error`` build event, and the run continues.  Re-running the export is
the way to recover.
"""

from __future__ import annotations

import shutil
import sys
import time
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from tabby._errors import CopyError
from tabby._types import BuildKind
from tabby.export.folder import clear_folder, list_files
from tabby.export.paths import clean_path

if TYPE_CHECKING:
    from tabby.content.protocols import PluginAsset
    from tabby.export.media import MediaAsset
    from tabby.export.static import Manifest
    from tabby.observability.collector import BuildCollector


class FileCopier:
    """Copies files into *output_folder*, recording them in *manifest*.

    Args:
        output_folder: Absolute path of the export output folder.
        manifest: Manifest shared with the rest of the run.
        events: Collector for build events.
        index_file_name: Index file name used when cleaning media paths.

    """

    def __init__(
        self,
        output_folder: str,
        manifest: Manifest,
        events: BuildCollector,
        *,
        index_file_name: str = "index.html",
    ) -> None:
        self._output_folder = output_folder
        self._manifest = manifest
        self._events = events
        self._index_file_name = index_file_name

    def copy(self, source: str | Path | None) -> Manifest:
        """Copy a file or folder to ``<output>/<name of source>``.

        A folder replaces the same-named folder in the output entirely.
        Missing sources are skipped.

        """
        if not source:
            return self._manifest
        source_path = Path(source)
        if not source_path.exists():
            return self._manifest

        target = Path(self._output_folder) / source_path.name

        if source_path.is_file():
            self.copy_file(source_path, target)
            return self._manifest

        t0 = time.perf_counter()
        clear_folder(target, events=self._events)
        try:
            shutil.copytree(source_path, target, dirs_exist_ok=True)
        except (OSError, shutil.Error) as exc:
            self._report(source_path, target, exc)
            return self._manifest

        copied = list_files(target)
        self._manifest.update(str(p) for p in copied)
        elapsed = (time.perf_counter() - t0) * 1000
        self._events.record_build("copy_file", str(source_path), str(target), duration_ms=elapsed)
        return self._manifest

    def copy_file(
        self,
        source: str | Path,
        target: str | Path,
        *,
        kind: BuildKind = "copy_file",
    ) -> bool:
        """Copy one file to *target*, creating parent folders.

        Returns:
            True if the file was copied and recorded.

        """
        t0 = time.perf_counter()
        target_path = Path(target)
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target_path)
        except OSError as exc:
            self._report(Path(source), target_path, exc)
            return False

        self._manifest.add(str(target_path))
        elapsed = (time.perf_counter() - t0) * 1000
        self._events.record_build(kind, str(source), str(target_path), duration_ms=elapsed)
        return True

    def copy_media(self, assets: Iterable[MediaAsset], render_base: str) -> Manifest:
        """Copy recorded media files to the paths their URLs point at.

        ``<render_base>/media/pages/about/photo.jpg`` is copied to
        ``<output>/media/pages/about/photo.jpg``.  Files referenced more
        than once are copied once.

        """
        seen: set[tuple[str, str]] = set()
        for asset in assets:
            if (asset.root, asset.url) in seen:
                continue
            seen.add((asset.root, asset.url))

            relative = "/" + asset.url.replace(render_base, "/")
            target = self._output_folder + clean_path(relative, self._index_file_name)
            self.copy_file(asset.root, target, kind="copy_media")
        return self._manifest

    def copy_plugin_assets(self, assets: Iterable[PluginAsset], media_path: str) -> Manifest:
        """Copy plugin assets to ``<output>/<media>/plugins/<plugin>/<path>``."""
        media = media_path.strip("/")
        for asset in assets:
            target = clean_path(
                f"{self._output_folder}/{media}/plugins/{asset.plugin_name}/{asset.path}",
                self._index_file_name,
            )
            self.copy_file(asset.root, target, kind="copy_plugin_asset")
        return self._manifest

    def _report(self, source: Path, target: Path, exc: BaseException) -> None:
        error = CopyError(f"Failed to copy {source} to {target}: {exc}")
        error.__cause__ = exc
        print(f"  Copy error: {error}", file=sys.stderr)
        self._events.record_error(str(source), str(target), error)

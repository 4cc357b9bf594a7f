"""Plugin asset discovery.

Plugins live in ``plugins/<name>/``.  Files below ``plugins/<name>/assets/``
are public: the export copies them to
``<output>/media/plugins/<name>/<path>``.
"""

from __future__ import annotations

from pathlib import Path

from tabby.content.protocols import PluginAsset

_ASSETS_DIR = "assets"


def discover_plugin_assets(plugins_dir: Path) -> tuple[PluginAsset, ...]:
    """Return every public asset of every plugin in *plugins_dir*.

    Skips hidden files, hidden plugins, and ``__pycache__`` directories.
    Returns an empty tuple when *plugins_dir* does not exist.

    """
    if not plugins_dir.is_dir():
        return ()

    results: list[PluginAsset] = []
    for plugin in sorted(plugins_dir.iterdir()):
        if not plugin.is_dir() or plugin.name.startswith((".", "_")):
            continue

        assets_root = plugin / _ASSETS_DIR
        if not assets_root.is_dir():
            continue

        for src_file in sorted(assets_root.rglob("*")):
            if not src_file.is_file():
                continue
            relative = src_file.relative_to(assets_root)
            if "__pycache__" in relative.parts:
                continue
            if any(part.startswith(".") for part in relative.parts):
                continue
            results.append(PluginAsset(
                root=src_file,
                path=relative.as_posix(),
                plugin_name=plugin.name,
            ))

    return tuple(results)

"""Bundled default theme and template lookup.

A site's own ``templates/`` directory shadows the bundled one: a page whose
template the site does not define renders with the template shipped here.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tabby.config import TabbyConfig


def _bundled_theme_path() -> Path:
    return Path(__file__).parent / "default"


def get_template_dirs(config: TabbyConfig) -> list[Path]:
    """Search path handed to Kida's ``FileSystemLoader``, site templates first."""
    bundled = _bundled_theme_path() / "templates"
    return [d for d in (config.templates_path, bundled) if d != bundled] + [bundled]


def find_template(dirs: Sequence[Path], name: str) -> Path | None:
    """First ``<dir>/<name>`` that exists along *dirs*."""
    return next((d / name for d in dirs if (d / name).is_file()), None)

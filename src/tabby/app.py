"""Tabby application entry point.

``build()`` loads the project configuration and content tree, runs the
static export, and prints a summary.
"""

import sys
import time
from pathlib import Path

from tabby._errors import ConfigError, ContentError
from tabby.config import TabbyConfig
from tabby.config_loader import load_config
from tabby.content.site import FolderSite
from tabby.export.static import ExportResult, StaticSiteGenerator


def _load_site(config: TabbyConfig) -> FolderSite:
    """Load the folder site for *config*.

    Raises:
        ConfigError: If the content tree or route modules cannot be loaded.

    """
    try:
        return FolderSite(config)
    except ContentError as exc:
        msg = f"Failed to load site from {config.root}: {exc}"
        raise ConfigError(msg) from exc


def build(root: str | Path = ".", **kwargs: object) -> ExportResult:
    """Export the site as static files.

    Renders the home page, every page in every configured language, and all
    custom routes, then copies media, plugin assets and extra paths.

    Args:
        root: Path to the project root.
        **kwargs: Override TabbyConfig fields.

    Returns:
        ExportResult describing the run.

    """
    from tabby.banner import print_banner

    config = load_config(Path(root), **kwargs)
    t0 = time.perf_counter()

    site = _load_site(config)
    load_ms = (time.perf_counter() - t0) * 1000

    print_banner(
        config, len(site.index()),
        route_count=len(site.router.definitions),
        load_ms=load_ms,
    )

    generator = StaticSiteGenerator(site, config)
    result = generator.export()

    _print_export_summary(result)
    return result


def _print_export_summary(result: ExportResult) -> None:
    """Print export completion summary to stderr."""
    lines = [
        "",
        "─" * 41,
        f"  Exported {result.total_pages} file{'s' if result.total_pages != 1 else ''}",
    ]
    if result.total_assets > 0:
        lines.append(
            f"  Copied {result.total_assets} asset{'s' if result.total_assets != 1 else ''}"
        )
    if result.errors:
        lines.append(f"  {len(result.errors)} file(s) could not be copied or removed:")
        lines.extend(f"    {error}" for error in result.errors)
    lines.append(f"  Output: {result.output_dir}")
    lines.append(f"  Done in {result.duration_ms:.0f}ms")

    print("\n".join(lines), file=sys.stderr)

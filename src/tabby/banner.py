"""Build banner — what is about to be exported, printed to stderr.

Color is dropped when ``NO_COLOR`` is set, ``TERM`` is ``dumb``, or stderr
is not a terminal.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tabby.config import TabbyConfig


# ---------------------------------------------------------------------------
# Styling (https://no-color.org)
# ---------------------------------------------------------------------------

def _use_color(stream: object) -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("TERM") == "dumb":
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


_STYLES = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "warn": "\033[33m",
    "brand": "\033[38;5;214m",
}


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def print_banner(
    config: TabbyConfig,
    page_count: int,
    *,
    route_count: int = 0,
    load_ms: float = 0.0,
    warnings: list[str] | None = None,
) -> None:
    """Print a summary of the loaded site before exporting.

    Args:
        config: Resolved TabbyConfig.
        page_count: Number of pages in the content tree.
        route_count: Number of route modules discovered.
        load_ms: Time spent loading the site in milliseconds.
        warnings: Messages shown below the summary.

    """
    from tabby import __version__

    color = _use_color(sys.stderr)
    s = {name: (code if color else "") for name, code in _STYLES.items()}
    reset, dim = s["reset"], s["dim"]

    loaded = f"{_plural(page_count, 'page')} loaded"
    if load_ms > 0:
        loaded += f" {dim}in {load_ms:.0f}ms{reset}"

    rows = [loaded]
    if config.languages:
        rows.append("languages: " + ", ".join(config.languages))
    if route_count:
        rows.append(_plural(route_count, "route"))
    if config.custom_routes:
        rows.append(_plural(len(config.custom_routes), "custom output"))
    rows.append(f"base url: {dim}{config.base_url or '(relative)'}{reset}")
    rows.append(f"output: {dim}{config.output_path}{reset}")

    out = [
        "",
        f"  {s['brand']}{s['bold']}tabby{reset} {dim}v{__version__}{reset}  {s['warn']}[build]{reset}",
        f"  {dim}{'─' * 43}{reset}",
    ]
    for i, row in enumerate(rows):
        branch = "└─" if i == len(rows) - 1 else "├─"
        out.append(f"  {dim}{branch}{reset} {row}")

    for warning in warnings or ():
        out.append(f"  {s['warn']}!{reset} {warning}")
    out.append("")

    print("\n".join(out), file=sys.stderr)

"""Path resolution and output path cleanup.

``resolve`` anchors ``./``-style paths at the project root so configuration
can name folders relative to the site instead of the working directory.

``clean_path`` turns the page-folder convention (``<url>/index.html``) into
a plain file path when the last URL segment already names a file, so a
custom route for ``feed.xml`` is written as ``feed.xml`` rather than
``feed.xml/index.html``.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path


def resolve(path: str | os.PathLike[str] | None, root: str | Path) -> str:
    """Resolve *path* to an absolute path.

    Paths starting with ``.`` are joined to *root* first.  Existing paths are
    canonicalized with ``os.path.realpath``; paths that do not exist yet are
    only normalized.

    ``resolve("./assets", "/proj")`` -> ``"/proj/assets"``
    ``resolve("/abs/path", "/proj")`` -> ``"/abs/path"``

    Returns an empty string for an empty *path*.

    """
    if not path:
        return ""
    path = os.fspath(path)
    if path.startswith("."):
        path = f"{os.fspath(root)}/{path}"
    if os.path.exists(path):
        return os.path.realpath(path)
    return os.path.normpath(path)


def resolve_many(
    paths: Iterable[str | os.PathLike[str] | None],
    root: str | Path,
) -> list[str]:
    """Resolve every path in *paths*, dropping empty results, keeping order."""
    return [resolved for resolved in (resolve(p, root) for p in paths) if resolved]


@lru_cache(maxsize=32)
def _index_patterns(index_file_name: str) -> tuple[re.Pattern[str], re.Pattern[str]]:
    index = re.escape(index_file_name)
    return (
        # about/feed.xml/index.html -> about/feed.xml
        re.compile(rf"([^/]+\.[a-z]{{2,5}})/{index}$", re.IGNORECASE),
        # about/.well-known/index.html -> about/.well-known
        re.compile(rf"(\.[^/.]+)/{index}$", re.IGNORECASE),
    )


def clean_path(path: str, index_file_name: str = "index.html") -> str:
    """Collapse doubled separators and redundant index file suffixes.

    ``/about//index.html``     -> ``/about/index.html``
    ``/feed.xml/index.html``   -> ``/feed.xml``
    ``/about/index.html``      -> ``/about/index.html``

    Runs until the path no longer changes, so the result is a fixed point:
    ``clean_path(clean_path(p)) == clean_path(p)``.

    """
    file_like, dotted = _index_patterns(index_file_name)
    while True:
        cleaned = path
        while "//" in cleaned:
            cleaned = cleaned.replace("//", "/")
        cleaned = file_like.sub(r"\1", cleaned)
        cleaned = dotted.sub(r"\1", cleaned)
        if cleaned == path:
            return cleaned
        path = cleaned

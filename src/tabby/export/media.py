"""Media capture — files referenced while pages render.

Rendering a page can reference files attached to content (images,
downloads).  Those files only exist in the output if they are copied, so
the content layer reports every file URL it hands out to the
``MediaCollector`` carried by the render context.  After all pages are
rendered the exporter drains the collector and copies each file to the
path its URL points at.

A process-wide collector, ``media_collector``, is available for content
layers that cannot receive the render context.

Thread Safety:
    All methods are protected by a ``threading.Lock``.  One export run at a
    time should own a collector.

"""

from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MediaAsset:
    """A file referenced by a rendered page.

    Attributes:
        root: Absolute path to the source file.
        url: URL the page used for the file (under the render-time base).

    """

    root: str
    url: str


class MediaCollector:
    """Records media references while active."""

    __slots__ = ("_active", "_assets", "_lock")

    def __init__(self) -> None:
        self._active = False
        self._assets: list[MediaAsset] = []
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        """Whether references are currently recorded."""
        return self._active

    def activate(self) -> None:
        self._active = True

    def deactivate(self) -> None:
        self._active = False

    def record(self, root: str, url: str) -> None:
        """Record that a page referenced *root* under *url*.

        Ignored while the collector is inactive, so content layers can call
        this unconditionally.
        """
        if not self._active:
            return
        with self._lock:
            self._assets.append(MediaAsset(root=str(root), url=url))

    def drain(self) -> list[MediaAsset]:
        """Return everything recorded so far.  The caller clears."""
        with self._lock:
            return list(self._assets)

    def clear(self) -> None:
        with self._lock:
            self._assets.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._assets)


media_collector = MediaCollector()

"""Render context switching.

Content sites cache what they render: parsed text, translated fields,
collections, whole pages.  Rendering the same tree once per language
would leak one language's content into the next unless every cache is
dropped before each render.  ``switch_language`` does that, points the
site at the page being rendered, and returns the explicit
``RenderContext`` handed to ``ContentNode.render``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tabby.content.protocols import ContentNode, ContentSite
    from tabby.export.media import MediaCollector


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Everything a single render call may depend on.

    Attributes:
        language: Language code to render in (*None* = single language).
        node: The page being rendered.
        base_url: Render-time base URL of the site.
        media: Collector that file references are reported to, or *None*
            when media capture is disabled.

    """

    language: str | None
    node: ContentNode
    base_url: str
    media: MediaCollector | None = None

    def record_media(self, root: str, url: str) -> None:
        """Report a file reference made while rendering."""
        if self.media is not None:
            self.media.record(root, url)


def reset_tree(node: ContentNode | ContentSite) -> None:
    """Drop cached content on *node*, its descendants, and their files."""
    node.reset_content()
    for child in node.children():
        reset_tree(child)
    for file in node.files():
        file.reset_content()


def switch_language(
    site: ContentSite,
    node: ContentNode,
    language: str | None,
    *,
    force_reset: bool = True,
    media: MediaCollector | None = None,
) -> RenderContext:
    """Prepare *site* for rendering *node* in *language*.

    Must run before every render.  With ``force_reset=False`` *node* is
    only reset when it exists in the tree.

    """
    site.reset_collections()
    site.set_language(language)

    reset_tree(site)
    if node.exists() or force_reset:
        reset_tree(node)

    site.flush_render_cache()
    site.visit(node, language)

    return RenderContext(
        language=language,
        node=node,
        base_url=site.base_url,
        media=media,
    )

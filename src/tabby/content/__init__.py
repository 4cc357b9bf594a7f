"""Content layer — what the exporter exports.

Defines the interfaces the exporter drives (``protocols``) and ships one
implementation: a content tree read from page folders, rendered with Kida
templates, with custom routes served by route modules.
"""

from tabby.content.protocols import (
    EMPTY,
    ContentFile,
    ContentNode,
    ContentSite,
    EmptyResult,
    NodeResult,
    PluginAsset,
    RouteResult,
    Router,
    TextResult,
)
from tabby.content.router import SiteRouter
from tabby.content.site import FolderPage, FolderSite

__all__ = [
    "EMPTY",
    "ContentFile",
    "ContentNode",
    "ContentSite",
    "EmptyResult",
    "FolderPage",
    "FolderSite",
    "NodeResult",
    "PluginAsset",
    "RouteResult",
    "Router",
    "SiteRouter",
    "TextResult",
]

"""Export layer — static output generation.

Renders a content site (every page in every language, plus custom routes)
to static files, rewrites render-time URLs, and copies media, plugin
assets and extra paths.
"""

from tabby.export.context import RenderContext, switch_language
from tabby.export.folder import MARKER_FILE_NAME, check_output_folder, clear_folder
from tabby.export.media import MediaAsset, MediaCollector, media_collector
from tabby.export.paths import clean_path, resolve, resolve_many
from tabby.export.rewrite import rewrite_urls
from tabby.export.routes import RouteSpec
from tabby.export.static import ExportResult, Manifest, StaticSiteGenerator

__all__ = [
    "MARKER_FILE_NAME",
    "ExportResult",
    "Manifest",
    "MediaAsset",
    "MediaCollector",
    "RenderContext",
    "RouteSpec",
    "StaticSiteGenerator",
    "check_output_folder",
    "clean_path",
    "clear_folder",
    "media_collector",
    "resolve",
    "resolve_many",
    "rewrite_urls",
    "switch_language",
]

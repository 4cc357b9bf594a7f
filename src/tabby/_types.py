"""Shared type definitions for tabby."""

from typing import Literal

# Translation context; None is the single-language case
type LanguageCode = str | None

# Absolute filesystem path written or copied into the output folder
type GeneratedFile = str

# URL or site-relative path (e.g., "/about", "feed.xml")
type RoutePath = str

# Category of a recorded build action
type BuildKind = Literal[
    "render",
    "copy_file",
    "copy_media",
    "copy_plugin_asset",
    "clear",
    "error",
]

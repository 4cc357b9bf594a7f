"""Tabby error hierarchy.

All tabby-specific errors inherit from TabbyError for easy catching.
"""

from __future__ import annotations


class TabbyError(Exception):
    """Base error for all tabby operations."""


class ConfigError(TabbyError):
    """Invalid or missing configuration (e.g. no usable output folder)."""


ConfigurationError = ConfigError


class OutputPermissionError(TabbyError, PermissionError):
    """The output folder exists, is not empty, and cannot be written."""


class UnsafeOverwriteError(TabbyError):
    """The output folder holds data that was not generated by tabby."""


class ContentError(TabbyError):
    """Error in content loading (front matter, page discovery, routing)."""


class RenderError(TabbyError):
    """A page failed to render.

    Attributes:
        key: Key of the page that failed.
        language: Language code the page was rendered in, if any.
        file: Source file of the failure, relative to the project root.
        line: Line number in ``file`` (0 when unknown).

    """

    def __init__(
        self,
        message: str,
        *,
        key: str = "",
        language: str | None = None,
        file: str = "",
        line: int = 0,
    ) -> None:
        super().__init__(message)
        self.key = key
        self.language = language
        self.file = file
        self.line = line


class CopyError(TabbyError):
    """A file or folder could not be copied into the output (non-fatal)."""

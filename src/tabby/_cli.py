"""Tabby CLI — tabby build.

Entry point for the ``tabby`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the tabby CLI."""
    parser = argparse.ArgumentParser(
        prog="tabby",
        description="Export a content site as static files.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    build_parser = subparsers.add_parser(
        "build",
        help="Export the site as static files",
    )
    build_parser.add_argument("root", nargs="?", default=".", help="Project root directory")
    build_parser.add_argument("--output", default=None, help="Output directory")
    build_parser.add_argument(
        "--base-url", default=None, help="Base URL the output is served from",
    )
    build_parser.add_argument(
        "--preserve",
        action="append",
        default=None,
        metavar="NAME",
        help="Output entry to keep when erasing (repeatable)",
    )
    build_parser.add_argument(
        "--skip-media", action="store_true", default=None,
        help="Do not copy media referenced by pages",
    )
    build_parser.add_argument(
        "--skip-plugin-assets", action="store_true", default=None,
        help="Do not copy plugin assets",
    )
    build_parser.add_argument(
        "--ignore-untranslated", action="store_true", default=None,
        help="Skip pages without a translation for a language",
    )
    build_parser.add_argument(
        "--index-file-name", default=None, help="File name written for page folders",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from tabby import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from tabby._errors import TabbyError
    from tabby.app import build

    if args.command == "build":
        try:
            build(
                root=args.root,
                output=args.output,
                base_url=args.base_url,
                preserve=args.preserve,
                skip_media=args.skip_media,
                skip_plugin_assets=args.skip_plugin_assets,
                ignore_untranslated_pages=args.ignore_untranslated,
                index_file_name=args.index_file_name,
            )
        except TabbyError as exc:
            print(f"  Error: {exc}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()

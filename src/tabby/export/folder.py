"""Output folder safety and cleanup.

Exporting replaces the contents of the output folder, so the folder is
checked first: it must be missing, empty, or carry proof that an earlier
export wrote it (the ``.tabbystatic`` marker, the ``.kirbystatic`` marker of
the Kirby generator, or an index file).  Anything else is refused rather
than erased.

Cleanup removes every top-level entry except dot-files and names the
caller asked to preserve.  It is best effort: failures are reported and
counted, the remaining entries are still removed.
"""

from __future__ import annotations

import os
import shutil
import sys
import time
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from tabby._errors import ConfigurationError, OutputPermissionError, UnsafeOverwriteError

if TYPE_CHECKING:
    from tabby.observability.collector import BuildCollector

MARKER_FILE_NAME = ".tabbystatic"

# Marker left by the Kirby static site generator, honored for folders it wrote
LEGACY_MARKER_FILE_NAMES = (".kirbystatic",)


def check_output_folder(folder: str | Path | None, index_file_name: str) -> None:
    """Refuse output folders that tabby does not own.

    Raises:
        ConfigurationError: If *folder* is empty or names a file.
        OutputPermissionError: If the folder has content and is not writable.
        UnsafeOverwriteError: If the folder has content but neither the
            marker file (current or legacy) nor an index file.

    """
    if not folder:
        msg = "Please specify a valid output folder."
        raise ConfigurationError(msg)

    path = Path(folder)
    if path.exists() and not path.is_dir():
        msg = f"The output folder {str(path)!r} is a file."
        raise ConfigurationError(msg)

    entries = list_entries(path)
    if not entries:
        return

    if not os.access(path, os.W_OK):
        msg = f"The output folder {str(path)!r} is not writable."
        raise OutputPermissionError(msg)

    names = {entry.name for entry in entries}
    if names & {MARKER_FILE_NAME, index_file_name, *LEGACY_MARKER_FILE_NAMES}:
        return

    msg = (
        f"The output folder {str(path)!r} already contains other files or "
        "folders. Please specify a path that does not exist yet or is empty. "
        f"If it has to be this path, create an empty {MARKER_FILE_NAME} file "
        "in it and retry. WARNING: everything in the output folder not "
        "starting with '.' is erased before generation, except for entries "
        "listed in 'preserve'."
    )
    raise UnsafeOverwriteError(msg)


def write_marker(folder: str | Path) -> Path:
    """Create the empty marker file that authorizes future erasure."""
    marker = Path(folder) / MARKER_FILE_NAME
    marker.parent.mkdir(parents=True, exist_ok=True)
    marker.write_bytes(b"")
    return marker


def clear_folder(
    folder: str | Path,
    preserve: Iterable[str] = (),
    *,
    events: BuildCollector | None = None,
) -> bool:
    """Remove the top-level entries of *folder*.

    Entries whose name is in *preserve* or starts with ``.`` are kept.

    Returns:
        True if every removal succeeded (or there was nothing to remove).

    """
    keep = frozenset(preserve)
    ok = True

    for entry in list_entries(Path(folder)):
        if entry.name in keep or entry.name.startswith("."):
            continue

        t0 = time.perf_counter()
        try:
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
        except OSError as exc:
            ok = False
            print(f"  Remove error: {entry}: {exc}", file=sys.stderr)
            if events is not None:
                events.record_error(str(entry), str(folder), exc)
            continue

        if events is not None:
            elapsed = (time.perf_counter() - t0) * 1000
            events.record_build("clear", str(entry), str(folder), duration_ms=elapsed)

    return ok


def list_entries(folder: Path) -> list[Path]:
    """Return the immediate entries of *folder* (empty if it does not exist)."""
    if not folder.is_dir():
        return []
    return sorted(folder.iterdir())


def list_files(folder: Path) -> list[Path]:
    """Return every file below *folder*, recursively, in sorted order."""
    if not folder.is_dir():
        return []
    return sorted(p for p in folder.rglob("*") if p.is_file())

"""Build event model.

Every action the exporter takes on the output folder is described by a
frozen ``BuildEvent``:

- ``render``: a page (or custom route) was rendered and written
- ``copy_file`` / ``copy_media`` / ``copy_plugin_asset``: a file was copied
- ``clear``: an output entry was removed before generation
- ``error``: a non-fatal failure (removal or copy) was skipped over

All events carry a monotonic nanosecond timestamp.

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass

from tabby._types import BuildKind


@dataclass(frozen=True, slots=True)
class BuildEvent:
    """An export pipeline action.

    Attributes:
        kind: The type of build action.
        source: Page key, source file path, or description.
        target: Output file path (or description).
        duration_ms: Time taken in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.
        language: Language code the action ran under, if any.
        message: Error detail for ``error`` events.

    """

    kind: BuildKind
    source: str
    target: str
    duration_ms: float
    timestamp_ns: int
    language: str | None = None
    message: str = ""


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()

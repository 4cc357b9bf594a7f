"""Build collector — records export actions into an event log.

The exporter, copier, and folder eraser all report through one
``BuildCollector`` so a run's history can be summarized (or inspected in
tests) after the fact.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from tabby._types import BuildKind
from tabby.observability.events import BuildEvent, now_ns
from tabby.observability.log import EventLog


class BuildCollector:
    """Event collector for one or more export runs.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record_build(
        self,
        kind: BuildKind,
        source: str,
        target: str,
        *,
        duration_ms: float = 0.0,
        language: str | None = None,
    ) -> None:
        """Record a successful build action."""
        self._log.append(
            BuildEvent(
                kind=kind,
                source=source,
                target=target,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
                language=language,
            )
        )

    def record_error(self, source: str, target: str, exc: BaseException) -> None:
        """Record a non-fatal failure that the pipeline skipped over."""
        self._log.append(
            BuildEvent(
                kind="error",
                source=source,
                target=target,
                duration_ms=0.0,
                timestamp_ns=now_ns(),
                message=f"{type(exc).__name__}: {exc}",
            )
        )

    def errors(self) -> list[BuildEvent]:
        """Return all recorded error events."""
        return self._log.query(kind="error")

    def count(self, kind: BuildKind) -> int:
        """Return the number of recorded events of *kind*."""
        return len(self._log.query(kind=kind))

"""Event log — bounded history of build events for one process.

Readers always work on a snapshot, so filtering never holds the lock.

Thread Safety:
    Mutation and snapshotting are guarded by a ``threading.Lock``.

"""

import threading
from collections import Counter, deque
from collections.abc import Iterable
from typing import Any

from tabby.observability.events import BuildEvent


class EventLog:
    """Keeps the newest *max_events* build events.

    Args:
        max_events: Capacity; older events fall off the front.

    """

    __slots__ = ("_events", "_lock", "_max_events")

    def __init__(self, max_events: int = 50_000) -> None:
        self._max_events = max_events
        self._events: deque[BuildEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def _snapshot(self) -> list[BuildEvent]:
        with self._lock:
            return list(self._events)

    # -- writing --

    def append(self, event: BuildEvent) -> None:
        with self._lock:
            self._events.append(event)

    def append_many(self, events: Iterable[BuildEvent]) -> None:
        with self._lock:
            self._events.extend(events)

    def clear(self) -> int:
        """Drop every event; return how many there were."""
        with self._lock:
            dropped = len(self._events)
            self._events.clear()
        return dropped

    # -- reading --

    def query(
        self,
        *,
        kind: str | None = None,
        since_ns: int = 0,
        path: str | None = None,
        limit: int | None = None,
    ) -> list[BuildEvent]:
        """Filter the log, oldest first.

        Args:
            kind: Exact event kind, e.g. ``"render"``.
            since_ns: Lower bound on ``timestamp_ns``.
            path: Substring of the event's source or target.
            limit: Keep only the newest *limit* matches.

        """

        def keep(event: BuildEvent) -> bool:
            if kind is not None and event.kind != kind:
                return False
            if event.timestamp_ns < since_ns:
                return False
            return path is None or path in event.source or path in event.target

        matches = [event for event in self._snapshot() if keep(event)]
        return matches if limit is None else matches[-limit:]

    def recent(self, n: int = 20) -> list[BuildEvent]:
        return self._snapshot()[-n:]

    def stats(self) -> dict[str, Any]:
        """Totals per kind plus the summed duration."""
        events = self._snapshot()
        return {
            "total": len(events),
            "max_events": self._max_events,
            "by_kind": dict(Counter(event.kind for event in events)),
            "duration_ms": sum(event.duration_ms for event in events),
        }

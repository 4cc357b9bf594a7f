"""Build observability — a record of everything an export did.

Quick Start:
    >>> from tabby.observability import BuildCollector, EventLog
    >>> collector = BuildCollector(EventLog())
    >>> collector.record_build("render", "about", "/out/about/index.html")
    >>> collector.count("render")
    1

"""

from tabby.observability.collector import BuildCollector
from tabby.observability.events import BuildEvent, now_ns
from tabby.observability.log import EventLog

__all__ = [
    "BuildCollector",
    "BuildEvent",
    "EventLog",
    "now_ns",
]

"""
Filesystem watching.
"""

from .filters import is_relevant, make_event_filter
from .watcher import CHANGE_EVENT_TYPES, SourceWatcher

__all__ = [
    "CHANGE_EVENT_TYPES",
    "SourceWatcher",
    "is_relevant",
    "make_event_filter",
]

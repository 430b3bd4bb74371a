"""
Relevance filtering for file change events.
"""

from typing import Callable, Iterable

from ..models.events import WatchEvent


def is_relevant(path: str, extensions: Iterable[str]) -> bool:
    """Return True if ``path`` ends with one of the source-file suffixes."""
    return any(path.endswith(ext) for ext in extensions)


def make_event_filter(extensions: Iterable[str]) -> Callable[[WatchEvent], bool]:
    """
    Build a predicate telling whether a watch event should trigger a rebuild.

    For moves, either side being a source file is enough: renaming a file
    onto ``a.go`` and renaming ``a.go`` away both change the build.
    """
    suffixes = tuple(extensions)

    def event_is_relevant(event: WatchEvent) -> bool:
        return any(is_relevant(path, suffixes) for path in event.paths)

    return event_is_relevant

"""
File watch event records passed from the watcher thread to the event loop.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class WatchEvent:
    """A change to a file under the watch root."""

    # Path of the changed file (the destination for moves).
    path: str
    # One of watchdog's event types: "created", "modified", "deleted", "moved".
    event_type: str = "modified"
    # Original path for moves, None otherwise.
    src_path: Optional[str] = None

    @property
    def paths(self) -> Tuple[str, ...]:
        if self.src_path and self.src_path != self.path:
            return (self.path, self.src_path)
        return (self.path,)

"""
Filesystem watcher feeding the supervisor's event loop.

The watchdog observer delivers events on its own threads. SourceWatcher turns
them into WatchEvent records and hands them to the asyncio loop through
``call_soon_threadsafe``, so the ``events`` and ``errors`` queues are only ever
touched from the loop thread.
"""

import asyncio
import logging
import os
import threading
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from ..models.events import WatchEvent
from ..validation import SetupError, WatcherError

logger = logging.getLogger(__name__)

# Open/close notifications are left out: a build reading its own sources
# would otherwise retrigger itself forever.
CHANGE_EVENT_TYPES = frozenset(
    {EVENT_TYPE_CREATED, EVENT_TYPE_MODIFIED, EVENT_TYPE_DELETED, EVENT_TYPE_MOVED}
)

OBSERVER_JOIN_TIMEOUT = 5.0


class SourceWatcher(FileSystemEventHandler):
    """
    Watches a source tree and publishes change events and errors.

    ``events`` receives a WatchEvent per file change; ``errors`` receives a
    WatcherError whenever an event cannot be translated or the observer
    thread dies. Neither is filtered for relevance here.
    """

    def __init__(
        self,
        root: Path,
        recursive: bool = True,
        health_check_interval: float = 1.0,
        observer_factory: Callable[[], Observer] = Observer,
    ):
        super().__init__()
        self.root = Path(root)
        self.recursive = recursive
        self.health_check_interval = health_check_interval
        self._observer_factory = observer_factory

        self.events: asyncio.Queue = asyncio.Queue()
        self.errors: asyncio.Queue = asyncio.Queue()

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._observer = None
        self._stopping = threading.Event()
        self._health_thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._observer is not None and not self._stopping.is_set()

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """
        Start watching the root directory.

        Must be called from the event loop thread unless ``loop`` is given.

        Raises:
            SetupError: If the watcher cannot be created or the root cannot
                be watched
        """
        if self._observer is not None:
            raise RuntimeError("Watcher already started")

        self._loop = loop or asyncio.get_running_loop()
        if not self.root.is_dir():
            raise SetupError(f"cannot watch {self.root}: not a directory")

        try:
            observer = self._observer_factory()
            observer.schedule(self, str(self.root), recursive=self.recursive)
            observer.start()
        except (OSError, RuntimeError) as e:
            raise SetupError(f"cannot watch {self.root}: {e}") from e

        self._observer = observer
        self._stopping.clear()
        self._health_thread = threading.Thread(
            target=self._check_health, name="buildwatch-watcher-health", daemon=True
        )
        self._health_thread.start()
        logger.info(
            f"Watching {self.root} ({'recursive' if self.recursive else 'top level only'})"
        )

    def stop(self) -> None:
        """Stop the observer and wait for its threads to finish."""
        if self._observer is None:
            return
        self._stopping.set()
        observer, self._observer = self._observer, None
        observer.stop()
        observer.join(timeout=OBSERVER_JOIN_TIMEOUT)
        if observer.is_alive():
            logger.warning("File watcher did not stop within timeout")
        if self._health_thread is not None:
            self._health_thread.join(timeout=OBSERVER_JOIN_TIMEOUT)
            self._health_thread = None
        logger.info(f"Stopped watching {self.root}")

    def on_any_event(self, event: FileSystemEvent) -> None:
        """Called on an observer thread for every filesystem event."""
        try:
            watch_event = self._translate(event)
        except Exception as e:
            self.report_error(
                WatcherError(f"could not process {event!r}: {e}", path=str(event.src_path))
            )
            return
        if watch_event is not None:
            self._publish(self.events, watch_event)

    def report_error(self, error: WatcherError) -> None:
        """Queue a watcher error for the event loop. Safe from any thread."""
        self._publish(self.errors, error)

    def _translate(self, event: FileSystemEvent) -> Optional[WatchEvent]:
        if event.is_directory or event.event_type not in CHANGE_EVENT_TYPES:
            return None
        if event.event_type == EVENT_TYPE_MOVED:
            return WatchEvent(
                path=_fsdecode(event.dest_path),
                event_type=event.event_type,
                src_path=_fsdecode(event.src_path),
            )
        return WatchEvent(path=_fsdecode(event.src_path), event_type=event.event_type)

    def _publish(self, queue: asyncio.Queue, item) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.debug(f"Dropping {item!r}: event loop is not running")
            return
        try:
            loop.call_soon_threadsafe(queue.put_nowait, item)
        except RuntimeError:
            # Loop closed between the check and the call.
            logger.debug(f"Dropping {item!r}: event loop closed")

    def _check_health(self) -> None:
        while not self._stopping.wait(self.health_check_interval):
            observer = self._observer
            if observer is not None and not observer.is_alive():
                self.report_error(WatcherError(f"file watcher for {self.root} stopped unexpectedly"))
                return


def _fsdecode(path) -> str:
    return os.fsdecode(path) if path is not None else ""

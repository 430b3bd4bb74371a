"""
Result aggregation and the display loop.

The aggregator is the single consumer of everything the supervisor produces:
file change events, watcher errors and the results of the build and test
commands. It runs as one coroutine, processes exactly one event per
iteration and redraws after each event that changed or reported something.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..display.presentation import TerminalDisplay
from ..execution.builder import Builder
from ..execution.reusable_command import ReusableCommand
from ..models.events import WatchEvent
from ..models.results import CommandResult, CommandStatus, can_transition
from ..validation import WatcherError, handle_watcher_error, ErrorSeverity

logger = logging.getLogger(__name__)


class EventSource(Enum):
    """Inputs of the display loop, in the order ready events are taken."""

    WATCH_EVENT = "watch_event"
    WATCH_ERROR = "watch_error"
    TEST_RESULT = "test_result"
    BUILD_RESULT = "build_result"


SOURCE_ORDER = (
    EventSource.WATCH_EVENT,
    EventSource.WATCH_ERROR,
    EventSource.TEST_RESULT,
    EventSource.BUILD_RESULT,
)


@dataclass
class DisplayState:
    """Last known build and test results."""

    build: CommandResult
    test: CommandResult

    @classmethod
    def initial(cls, build_name: str, test_name: str) -> "DisplayState":
        return cls(build=CommandResult.dirty(build_name), test=CommandResult.dirty(test_name))

    def mark_dirty(self) -> None:
        """Flag both results as stale while a rebuild is in progress."""
        self.build = self.build.as_dirty()
        self.test = self.test.as_dirty()

    def update(self, slot: str, result: CommandResult) -> bool:
        """
        Replace the result of ``slot`` ("build" or "test").

        Returns:
            False if the status change is not allowed and the result was dropped
        """
        current = getattr(self, slot)
        if not can_transition(current.status, result.status):
            logger.warning(
                f"Ignoring {slot} result: {current.status.value} -> {result.status.value} "
                f"is not a valid transition"
            )
            return False
        setattr(self, slot, result)
        return True


class ResultAggregator:
    """
    Merges watch events and command results into the display state.

    ``watcher`` is anything exposing ``events`` and ``errors`` asyncio queues.
    """

    def __init__(
        self,
        builder: Builder,
        watcher: Any,
        display: TerminalDisplay,
        event_filter: Callable[[WatchEvent], bool],
    ):
        self.builder = builder
        self.watcher = watcher
        self.display = display
        self.event_filter = event_filter

        self.state = DisplayState.initial(builder.build_cmd.name, builder.test_cmd.name)
        self.events_processed = 0
        self.redraws = 0

        self._shutdown = asyncio.Event()
        self._pending: Dict[EventSource, asyncio.Task] = {}

    def request_shutdown(self) -> None:
        """Ask the loop to exit after the current iteration."""
        if not self._shutdown.is_set():
            logger.info("Shutdown requested")
        self._shutdown.set()

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown.is_set()

    def render(self) -> None:
        self.display.render(self.state.build, self.state.test)
        self.redraws += 1

    async def run(self) -> None:
        """Process events until a shutdown is requested."""
        getters = {
            EventSource.WATCH_EVENT: self.watcher.events.get,
            EventSource.WATCH_ERROR: self.watcher.errors.get,
            EventSource.TEST_RESULT: self.builder.test_cmd.results.get,
            EventSource.BUILD_RESULT: self.builder.build_cmd.results.get,
        }
        shutdown_waiter = asyncio.create_task(self._shutdown.wait(), name="aggregator-shutdown")
        try:
            while not self._shutdown.is_set():
                for source, getter in getters.items():
                    if source not in self._pending:
                        self._pending[source] = asyncio.create_task(
                            getter(), name=f"aggregator-{source.value}"
                        )

                await asyncio.wait(
                    [shutdown_waiter, *self._pending.values()],
                    return_when=asyncio.FIRST_COMPLETED,
                )
                if self._shutdown.is_set():
                    break

                source = self._next_ready_source()
                if source is None:
                    continue
                item = self._pending.pop(source).result()
                if await self.process(source, item):
                    self.render()
        finally:
            leftovers = [shutdown_waiter, *self._pending.values()]
            self._pending.clear()
            for task in leftovers:
                task.cancel()
            await asyncio.wait(leftovers)
            logger.debug(f"Display loop stopped after {self.events_processed} events")

    def _next_ready_source(self) -> Optional[EventSource]:
        for source in SOURCE_ORDER:
            task = self._pending.get(source)
            if task is not None and task.done():
                return source
        return None

    async def process(self, source: EventSource, item: Any) -> bool:
        """
        Apply one event to the display state.

        Returns:
            True if the display should be redrawn
        """
        self.events_processed += 1
        if source is EventSource.WATCH_EVENT:
            return await self.handle_watch_event(item)
        if source is EventSource.WATCH_ERROR:
            return self.handle_watcher_error(item)
        if source is EventSource.TEST_RESULT:
            return self.handle_result("test", self.builder.test_cmd, item)
        return self.handle_result("build", self.builder.build_cmd, item)

    async def handle_watch_event(self, event: WatchEvent) -> bool:
        """Restart the builder and invalidate both results for relevant changes."""
        if not self.event_filter(event):
            logger.debug(f"Ignoring change to {event.path}")
            return False

        logger.info(f"{event.path} {event.event_type}, rebuilding")
        await self.builder.start()
        self.state.mark_dirty()
        return True

    def handle_watcher_error(self, error: WatcherError) -> bool:
        handle_watcher_error(error, severity=ErrorSeverity.ERROR, logger=logger)
        return True

    def handle_result(self, slot: str, command: ReusableCommand, result: CommandResult) -> bool:
        """Overwrite the stored result of ``slot`` with a current result."""
        if not command.is_current(result):
            logger.debug(f"Dropping {slot} result of superseded run {result.run_id}")
            return False
        if result.status is CommandStatus.DIRTY:
            return False
        return self.state.update(slot, result)

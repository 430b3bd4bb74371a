"""
Supervisor wiring.

Connects the file watcher, the builder and the display loop, and owns the
startup and shutdown sequence:

1. draw the initial state (both results in progress)
2. start watching the root directory; failure here is fatal
3. launch an initial build and test
4. run the display loop until shutdown is requested
5. kill both commands and stop the watcher
"""

import asyncio
import logging
from typing import Callable, Optional

from rich.console import Console
from watchdog.observers import Observer

from ..display.presentation import TerminalDisplay
from ..execution.builder import Builder
from ..models.config import AppConfig
from ..system.commands import check_program_available
from ..watching.filters import make_event_filter
from ..watching.watcher import SourceWatcher
from .aggregator import ResultAggregator
from .signal_handler import SignalHandler

logger = logging.getLogger(__name__)


class Supervisor:
    """Rebuilds and retests a source tree whenever one of its files changes."""

    def __init__(
        self,
        config: AppConfig,
        console: Optional[Console] = None,
        observer_factory: Callable[[], Observer] = Observer,
        handle_signals: bool = True,
    ):
        self.config = config
        self.handle_signals = handle_signals
        self.builder = Builder.from_config(config)
        self.watcher = SourceWatcher(
            config.watch.root,
            recursive=config.watch.recursive,
            health_check_interval=config.watch.health_check_interval,
            observer_factory=observer_factory,
        )
        self.display = TerminalDisplay(console, clear_screen=config.output.clear_screen)
        self.aggregator = ResultAggregator(
            builder=self.builder,
            watcher=self.watcher,
            display=self.display,
            event_filter=make_event_filter(config.watch.extensions),
        )

    def request_shutdown(self) -> None:
        self.aggregator.request_shutdown()

    async def run(self) -> None:
        """
        Run until shutdown is requested.

        Raises:
            SetupError: If the root directory cannot be watched
        """
        for command in self.builder.commands:
            if not check_program_available(command.args, cwd=command.cwd):
                logger.warning(f"{command.name}: program '{command.args[0]}' was not found")

        self.aggregator.render()
        self.watcher.start()

        signal_handler = None
        if self.handle_signals:
            signal_handler = SignalHandler(asyncio.get_running_loop(), self.request_shutdown)
            signal_handler.setup_signal_handlers()

        try:
            await self.builder.start()
            await self.aggregator.run()
        finally:
            if signal_handler is not None:
                signal_handler.cleanup_signal_handlers()
            await self.builder.kill()
            # stop() joins the observer threads.
            await asyncio.get_running_loop().run_in_executor(None, self.watcher.stop)
            logger.info("Supervisor stopped")


def run_supervisor(config: AppConfig, console: Optional[Console] = None) -> None:
    """Run a Supervisor on a fresh event loop until it is shut down."""
    asyncio.run(Supervisor(config, console=console).run())

"""
Signal handling for the supervisor.

SIGINT and SIGTERM request a graceful shutdown of the display loop. Handlers
are installed on the asyncio loop where the platform supports it and restored
when the supervisor stops.
"""

import asyncio
import logging
import signal
from typing import Any, Callable, Dict

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class SignalHandler:
    """
    Routes shutdown signals to a callback running on the event loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, on_shutdown: Callable[[], None]):
        self.loop = loop
        self.on_shutdown = on_shutdown
        self._loop_handlers: list = []
        self._original_handlers: Dict[int, Any] = {}

    def setup_signal_handlers(self) -> None:
        """Install handlers for SIGINT and SIGTERM."""
        for signum in SHUTDOWN_SIGNALS:
            try:
                self.loop.add_signal_handler(signum, self._handle_signal, signum)
                self._loop_handlers.append(signum)
            except (NotImplementedError, RuntimeError):
                # No loop signal support (e.g. Windows); fall back to signal.signal.
                try:
                    self._original_handlers[signum] = signal.signal(signum, self._threadsafe_handler)
                except ValueError as e:
                    logger.warning(f"Failed to set up handler for signal {signum}: {e}")
        logger.debug("Signal handlers set up")

    def cleanup_signal_handlers(self) -> None:
        """Restore the handlers that were in place before setup."""
        for signum in self._loop_handlers:
            self.loop.remove_signal_handler(signum)
        self._loop_handlers.clear()

        for signum, handler in self._original_handlers.items():
            try:
                signal.signal(signum, handler)
            except ValueError as e:
                logger.warning(f"Failed to restore handler for signal {signum}: {e}")
        self._original_handlers.clear()
        logger.debug("Signal handlers restored")

    def _handle_signal(self, signum: int) -> None:
        logger.info(f"Signal {signal.strsignal(signum)} received. Shutting down...")
        self.on_shutdown()

    def _threadsafe_handler(self, signum: int, frame: Any) -> None:
        self.loop.call_soon_threadsafe(self._handle_signal, signum)

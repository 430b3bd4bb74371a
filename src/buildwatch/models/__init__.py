"""
Data models for the supervisor.

Configuration Models:
- Watched tree, supervised commands, output and logging settings

Result Models:
- Command status, per-run results and termination reasons

Event Models:
- File change records handed from the watcher to the event loop
"""

from .config import (
    AppConfig,
    CommandConfig,
    LoggingConfig,
    OutputConfig,
    WatchConfig,
    default_build_command,
    default_test_command,
)
from .events import WatchEvent
from .results import CommandResult, CommandStatus, TerminationReason, can_transition

__all__ = [
    # Configuration
    "AppConfig",
    "CommandConfig",
    "LoggingConfig",
    "OutputConfig",
    "WatchConfig",
    "default_build_command",
    "default_test_command",
    # Results
    "CommandResult",
    "CommandStatus",
    "TerminationReason",
    "can_transition",
    # Events
    "WatchEvent",
]

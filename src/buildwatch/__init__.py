"""
buildwatch: file-change-triggered rebuild and test supervisor.

The package watches a source tree and, on every relevant modification,
cancels any in-flight build and test run and launches fresh ones, showing the
latest known status of each.

The package is organized into specialized modules:
- config: Configuration loading and validation
- models: Data structures and type definitions
- validation: Input validation and the error taxonomy
- system: Process execution primitives
- execution: Restartable command slots and the builder
- watching: Filesystem watching and relevance filtering
- display: Terminal presentation
- orchestration: The display loop and supervisor wiring
- cli: Command-line interface

Usage:
    From command line:
        buildwatch --build-cmd "go build ./..." --test-cmd "go test ./..."

    Programmatically:
        from buildwatch import Supervisor, get_config
        asyncio.run(Supervisor(get_config()).run())
"""

from .cli import main_cli
from .config import clear_config_cache, get_config, set_config_path
from .execution import Builder, ReusableCommand
from .models import (
    AppConfig,
    CommandConfig,
    CommandResult,
    CommandStatus,
    TerminationReason,
    WatchConfig,
    WatchEvent,
)
from .orchestration import DisplayState, ResultAggregator, Supervisor, run_supervisor
from .validation import ProcessLaunchError, SetupError, ValidationError, WatcherError

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "main_cli",
    "get_config",
    "set_config_path",
    "clear_config_cache",
    "Supervisor",
    "run_supervisor",
    # Core components
    "Builder",
    "ReusableCommand",
    "ResultAggregator",
    "DisplayState",
    # Models
    "AppConfig",
    "CommandConfig",
    "CommandResult",
    "CommandStatus",
    "TerminationReason",
    "WatchConfig",
    "WatchEvent",
    # Errors
    "ProcessLaunchError",
    "SetupError",
    "ValidationError",
    "WatcherError",
]

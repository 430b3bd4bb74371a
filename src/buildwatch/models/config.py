"""
Configuration data models.

This module contains the configuration structures for the watched tree, the
two supervised commands, output handling and logging, loaded from
`buildwatch.toml`.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass
class CommandConfig:
    """
    Configuration for one supervised command, loaded from `[commands.<slot>]`.
    """

    # Label shown in the display (e.g. "Build").
    name: str
    # Program followed by its arguments. Never run through a shell.
    args: List[str]


@dataclass
class WatchConfig:
    """
    Configuration for the file watcher, loaded from `[watch]`.
    """

    # Root of the watched source tree.
    root: Path = Path(".")
    # File suffixes whose changes trigger a rebuild.
    extensions: List[str] = field(default_factory=lambda: [".go"])
    # Watch subdirectories as well as the root.
    recursive: bool = True
    # Seconds between checks that the watcher thread is still alive.
    health_check_interval: float = 1.0


@dataclass
class OutputConfig:
    """
    Configuration for process output and the display, loaded from `[output]`.
    """

    # Fold standard error into the captured output instead of discarding it.
    merge_stderr: bool = False
    # Clear the terminal before each redraw.
    clear_screen: bool = True


@dataclass
class LoggingConfig:
    """
    Configuration for diagnostic logging, loaded from `[logging]`.
    """

    level: str = "WARNING"
    # Optional file receiving a copy of the log.
    file: Optional[Path] = None


def default_build_command() -> CommandConfig:
    return CommandConfig(name="Build", args=["go", "build", "./..."])


def default_test_command() -> CommandConfig:
    return CommandConfig(name="Test", args=["go", "test", "-v", "./..."])


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    watch: WatchConfig = field(default_factory=WatchConfig)
    build: CommandConfig = field(default_factory=default_build_command)
    test: CommandConfig = field(default_factory=default_test_command)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

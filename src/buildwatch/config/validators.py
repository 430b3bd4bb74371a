"""
Configuration validation utilities.

This module turns raw TOML data into validated configuration models. Missing
keys fall back to the defaults declared on the models.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.config import (
    AppConfig,
    CommandConfig,
    LoggingConfig,
    OutputConfig,
    WatchConfig,
    default_build_command,
    default_test_command,
)
from ..validation import (
    ValidationError,
    validate_bool,
    validate_command_args,
    validate_enum_choice,
    validate_extensions,
    validate_non_empty_string,
    validate_positive_float,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _section(data: Dict[str, Any], key: str, field_name: str) -> Dict[str, Any]:
    section = data.get(key, {})
    if not isinstance(section, dict):
        raise ValidationError(
            f"{field_name} must be a table",
            field_name=field_name,
            value=section,
        )
    return section


def validate_watch_config(watch_data: Dict[str, Any], base_dir: Optional[Path] = None) -> WatchConfig:
    """
    Validate and create a WatchConfig from the raw `[watch]` table.

    Args:
        watch_data: Raw watch configuration from TOML
        base_dir: Directory relative roots are resolved against

    Returns:
        Validated WatchConfig instance

    Raises:
        ValidationError: If validation fails
    """
    defaults = WatchConfig()

    root_value = watch_data.get("root", str(defaults.root))
    root = Path(validate_non_empty_string(root_value, field_name="watch.root"))
    if base_dir is not None and not root.is_absolute():
        root = base_dir / root

    extensions = validate_extensions(
        watch_data.get("extensions", defaults.extensions),
        field_name="watch.extensions",
    )
    recursive = validate_bool(
        watch_data.get("recursive", defaults.recursive),
        field_name="watch.recursive",
    )
    health_check_interval = validate_positive_float(
        watch_data.get("health_check_interval", defaults.health_check_interval),
        min_value=0.05,
        max_value=60.0,
        field_name="watch.health_check_interval",
    )

    return WatchConfig(
        root=root,
        extensions=extensions,
        recursive=recursive,
        health_check_interval=health_check_interval,
    )


def validate_command_config(
    command_data: Dict[str, Any], default: CommandConfig, slot: str
) -> CommandConfig:
    """
    Validate one `[commands.<slot>]` table.

    ``args`` may be a list or a shell-like string; it is stored as a list.
    """
    name = validate_non_empty_string(
        command_data.get("name", default.name),
        field_name=f"commands.{slot}.name",
    )
    args = validate_command_args(
        command_data.get("args", default.args),
        field_name=f"commands.{slot}.args",
    )
    return CommandConfig(name=name, args=args)


def validate_output_config(output_data: Dict[str, Any]) -> OutputConfig:
    """Validate the `[output]` table."""
    defaults = OutputConfig()
    return OutputConfig(
        merge_stderr=validate_bool(
            output_data.get("merge_stderr", defaults.merge_stderr),
            field_name="output.merge_stderr",
        ),
        clear_screen=validate_bool(
            output_data.get("clear_screen", defaults.clear_screen),
            field_name="output.clear_screen",
        ),
    )


def validate_logging_config(logging_data: Dict[str, Any], base_dir: Optional[Path] = None) -> LoggingConfig:
    """Validate the `[logging]` table. An empty ``file`` disables the log file."""
    defaults = LoggingConfig()
    level = validate_enum_choice(
        logging_data.get("level", defaults.level),
        choices=LOG_LEVELS,
        field_name="logging.level",
        case_sensitive=False,
    )

    file_value = logging_data.get("file", "")
    if not isinstance(file_value, str):
        raise ValidationError(
            "logging.file must be a string",
            field_name="logging.file",
            value=file_value,
        )
    log_file = None
    if file_value.strip():
        log_file = Path(file_value)
        if base_dir is not None and not log_file.is_absolute():
            log_file = base_dir / log_file

    return LoggingConfig(level=level, file=log_file)


def validate_app_config(data: Dict[str, Any], base_dir: Optional[Path] = None) -> AppConfig:
    """
    Validate a complete parsed configuration file.

    Args:
        data: Parsed TOML document
        base_dir: Directory containing the configuration file

    Returns:
        Validated AppConfig instance

    Raises:
        ValidationError: If any section is invalid
    """
    commands = _section(data, "commands", "commands")

    app_config = AppConfig(
        watch=validate_watch_config(_section(data, "watch", "watch"), base_dir),
        build=validate_command_config(
            _section(commands, "build", "commands.build"), default_build_command(), "build"
        ),
        test=validate_command_config(
            _section(commands, "test", "commands.test"), default_test_command(), "test"
        ),
        output=validate_output_config(_section(data, "output", "output")),
        logging=validate_logging_config(_section(data, "logging", "logging"), base_dir),
    )
    logger.debug(f"Validated configuration: {app_config}")
    return app_config

"""
Validation and error handling for the buildwatch package.

This module provides input validation and the error taxonomy with
consistent error reporting across the application.
"""

from .exceptions import (
    ErrorSeverity,
    ProcessLaunchError,
    SetupError,
    ValidationError,
    WatcherError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_watcher_error,
)

from .validators import (
    validate_bool,
    validate_command_args,
    validate_directory,
    validate_enum_choice,
    validate_extensions,
    validate_non_empty_string,
    validate_positive_float,
)

__all__ = [
    # Errors
    "ErrorSeverity",
    "ProcessLaunchError",
    "SetupError",
    "ValidationError",
    "WatcherError",
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    "handle_watcher_error",
    # Validators
    "validate_bool",
    "validate_command_args",
    "validate_directory",
    "validate_enum_choice",
    "validate_extensions",
    "validate_non_empty_string",
    "validate_positive_float",
]

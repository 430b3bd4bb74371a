"""
Validation functions for configuration values and CLI arguments.
"""

import os
import shlex
from pathlib import Path
from typing import Any, List, Optional, Union

from .exceptions import ValidationError


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a number within the given bounds.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated float value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    if float_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and float_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    return float_value


def validate_bool(value: Any, field_name: str = "value") -> bool:
    """Validate that a value is a real boolean (TOML true/false)."""
    if not isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a boolean, got {value!r}",
            field_name=field_name,
            value=value
        )
    return value


def validate_directory(path: Union[str, Path], field_name: str = "path") -> Path:
    """
    Validate that a path exists and is a directory.

    Args:
        path: Path to validate
        field_name: Name of the field being validated

    Returns:
        The path as a ``Path``

    Raises:
        ValidationError: If the path is missing or not a directory
    """
    path_str = str(path)
    if not path_str or not os.path.exists(path_str):
        raise ValidationError(
            f"{field_name} does not exist: {path_str}",
            field_name=field_name,
            value=path_str
        )
    if not os.path.isdir(path_str):
        raise ValidationError(
            f"{field_name} is not a directory: {path_str}",
            field_name=field_name,
            value=path_str
        )
    return Path(path_str)


def validate_command_args(
    command: Union[str, List[str]],
    field_name: str = "command"
) -> List[str]:
    """
    Validate a command given either as an argument list or a shell-like string.

    Strings are split with ``shlex``; no shell is ever involved in running
    the result.

    Args:
        command: ``["go", "build", "./..."]`` or ``"go build ./..."``
        field_name: Name of the field being validated

    Returns:
        The command as a non-empty list of strings

    Raises:
        ValidationError: If the command is empty or malformed
    """
    if isinstance(command, str):
        try:
            args = shlex.split(command)
        except ValueError as e:
            raise ValidationError(
                f"{field_name} could not be parsed: {e}",
                field_name=field_name,
                value=command
            )
    elif isinstance(command, (list, tuple)):
        args = list(command)
    else:
        raise ValidationError(
            f"{field_name} must be a string or a list of strings",
            field_name=field_name,
            value=command
        )

    if not args:
        raise ValidationError(
            f"{field_name} must not be empty",
            field_name=field_name,
            value=command
        )
    for i, arg in enumerate(args):
        if not isinstance(arg, str):
            raise ValidationError(
                f"{field_name}[{i}] must be a string, got {arg!r}",
                field_name=field_name,
                value=command
            )
        if "\x00" in arg:
            raise ValidationError(
                f"{field_name}[{i}] must not contain NUL characters",
                field_name=field_name,
                value=command
            )
    if not args[0].strip():
        raise ValidationError(
            f"{field_name} must name a program",
            field_name=field_name,
            value=command
        )
    return args


def validate_extensions(
    extensions: Union[str, List[str]],
    field_name: str = "extensions"
) -> List[str]:
    """
    Validate the list of source-file suffixes that trigger a rebuild.

    A bare ``go`` is accepted and normalised to ``.go``.
    """
    if isinstance(extensions, str):
        extensions = [extensions]
    if not isinstance(extensions, list) or not extensions:
        raise ValidationError(
            f"{field_name} must be a non-empty list of file suffixes",
            field_name=field_name,
            value=extensions
        )

    validated = []
    for i, ext in enumerate(extensions):
        if not isinstance(ext, str) or not ext.strip(".").strip():
            raise ValidationError(
                f"{field_name}[{i}] must be a non-empty suffix such as '.go'",
                field_name=field_name,
                value=ext
            )
        ext = ext.strip()
        if not ext.startswith("."):
            ext = "." + ext
        if ext not in validated:
            validated.append(ext)
    return validated


def validate_non_empty_string(value: Any, field_name: str = "value") -> str:
    """Validate that a value is a non-blank string."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=value
        )
    return value


def validate_enum_choice(
    value: Any,
    choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Args:
        value: Value to validate
        choices: List of allowed choices
        field_name: Name of the field being validated
        case_sensitive: Whether the comparison should be case-sensitive

    Returns:
        The matching choice, in the case used by ``choices``

    Raises:
        ValidationError: If value is not in choices
    """
    str_value = str(value)

    if case_sensitive:
        if str_value not in choices:
            raise ValidationError(
                f"{field_name} must be one of {choices}, got {value}",
                field_name=field_name,
                value=value
            )
        return str_value

    lower_choices = [choice.lower() for choice in choices]
    lower_value = str_value.lower()
    if lower_value not in lower_choices:
        raise ValidationError(
            f"{field_name} must be one of {choices}, got {value}",
            field_name=field_name,
            value=value
        )
    return choices[lower_choices.index(lower_value)]

"""
Presentation of build and test status.
"""

from .presentation import (
    STATUS_ICONS,
    STATUS_STYLES,
    TerminalDisplay,
    format_result,
    status_icon,
)

__all__ = [
    "STATUS_ICONS",
    "STATUS_STYLES",
    "TerminalDisplay",
    "format_result",
    "status_icon",
]

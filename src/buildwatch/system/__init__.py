"""
System interaction utilities.

This module provides the process execution primitive used by the supervised
commands and checks for the programs they need.
"""

from .commands import check_program_available
from .processes import (
    classify_termination,
    decode_output,
    describe_command,
    kill_process_group,
    kill_process_tree,
    launch_process,
)

__all__ = [
    "check_program_available",
    "classify_termination",
    "decode_output",
    "describe_command",
    "kill_process_group",
    "kill_process_tree",
    "launch_process",
]

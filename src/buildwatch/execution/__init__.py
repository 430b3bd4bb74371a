"""
Supervised command execution.

ReusableCommand owns a single restartable process slot; Builder drives the
build and test slots together.
"""

from .builder import Builder
from .reusable_command import ReusableCommand

__all__ = [
    "Builder",
    "ReusableCommand",
]

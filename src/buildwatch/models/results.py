"""
Command result data models.

This module defines the status of a supervised command, the result record a
command publishes after each completed run, and the classification of how a
process terminated.

Status transitions for a displayed result are restricted: a result only moves
between OK and BAD by passing through DIRTY, which marks a run in progress.
"""

from dataclasses import dataclass, replace
from enum import Enum


class CommandStatus(Enum):
    """Latest known state of a supervised command."""

    DIRTY = "dirty"
    OK = "ok"
    BAD = "bad"


class TerminationReason(Enum):
    """How a supervised process ended."""

    KILLED = "killed"
    EXITED_OK = "exited_ok"
    EXITED_ERROR = "exited_error"


# Allowed (old, new) status pairs for a displayed result.
_ALLOWED_TRANSITIONS = {
    (CommandStatus.DIRTY, CommandStatus.DIRTY),
    (CommandStatus.DIRTY, CommandStatus.OK),
    (CommandStatus.DIRTY, CommandStatus.BAD),
    (CommandStatus.OK, CommandStatus.DIRTY),
    (CommandStatus.BAD, CommandStatus.DIRTY),
}


def can_transition(old: CommandStatus, new: CommandStatus) -> bool:
    """Return True if a displayed result may move from ``old`` to ``new``."""
    return (old, new) in _ALLOWED_TRANSITIONS


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of one completed run of a supervised command.

    ``run_id`` identifies the run that produced the result so that results of
    superseded runs can be told apart from current ones. Display placeholders
    use 0.
    """

    # Label of the command that produced the result (e.g. "Build").
    name: str
    # Captured standard output.
    output: str = ""
    status: CommandStatus = CommandStatus.DIRTY
    run_id: int = 0

    @classmethod
    def dirty(cls, name: str) -> "CommandResult":
        """Placeholder for a command that has not completed yet."""
        return cls(name=name)

    def as_dirty(self) -> "CommandResult":
        """Copy of this result marked as in progress, keeping its output."""
        return replace(self, status=CommandStatus.DIRTY)

    def __str__(self) -> str:
        return f"{self.name} {self.status.value}: {self.output}"

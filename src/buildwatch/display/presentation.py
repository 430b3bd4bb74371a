"""
Terminal presentation of command results.

Formatting is a pure function of a CommandResult; the only state lives in the
rich Console that TerminalDisplay writes to.
"""

from typing import Optional

from rich.console import Console
from rich.text import Text

from ..models.results import CommandResult, CommandStatus

STATUS_ICONS = {
    CommandStatus.DIRTY: "⟳",
    CommandStatus.OK: "✔",
    CommandStatus.BAD: "✘",
}

STATUS_STYLES = {
    CommandStatus.DIRTY: "bold white",
    CommandStatus.OK: "bold green",
    CommandStatus.BAD: "bold red",
}

# Output of a run that is being replaced is shown faded.
STALE_OUTPUT_STYLE = "dim"


def status_icon(status: CommandStatus) -> str:
    return STATUS_ICONS[status]


def format_result(result: CommandResult) -> Text:
    """
    Render one result as ``"<name> <icon>: <output>"``.

    The label and icon carry the status colour; output of a DIRTY result is
    dimmed because a newer run is already in progress.
    """
    text = Text(no_wrap=False)
    text.append(f"{result.name} {status_icon(result.status)}", style=STATUS_STYLES[result.status])
    text.append(": ")
    output = result.output.rstrip("\n")
    if result.status is CommandStatus.DIRTY:
        text.append(output, style=STALE_OUTPUT_STYLE)
    else:
        text.append(output)
    return text


class TerminalDisplay:
    """Draws the build and test results on a terminal."""

    def __init__(self, console: Optional[Console] = None, clear_screen: bool = True):
        self.console = console or Console(highlight=False)
        self.clear_screen = clear_screen

    def render(self, build: CommandResult, test: CommandResult) -> None:
        """Clear the display surface, then print the build line and the test line."""
        if self.clear_screen:
            self.console.clear()
        self.console.print(format_result(build))
        self.console.print(format_result(test))

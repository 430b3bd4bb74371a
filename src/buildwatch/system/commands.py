"""
System dependency checks for supervised commands.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


def check_program_available(args: Sequence[str], cwd: Optional[Path] = None) -> bool:
    """
    Check that the program of a command can be found.

    Programs given with a path are resolved against ``cwd``; bare names are
    looked up on PATH.

    Returns:
        True if the program exists, False otherwise.
    """
    if not args:
        return False
    program = args[0]
    if "/" in program:
        candidate = Path(program)
        if cwd is not None and not candidate.is_absolute():
            candidate = cwd / candidate
        return candidate.exists()
    if shutil.which(program) is None:
        logger.debug(f"'{program}' not found on PATH")
        return False
    return True

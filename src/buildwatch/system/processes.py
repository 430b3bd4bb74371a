"""
Process execution primitives.

This module starts supervised commands as asyncio subprocesses, forcibly
terminates them together with their descendants, and classifies how they
ended.
"""

import asyncio
import logging
import os
import signal
from pathlib import Path
from typing import List, Optional, Sequence

import psutil

from ..models.results import TerminationReason
from ..validation import ProcessLaunchError

logger = logging.getLogger(__name__)

_IS_POSIX = os.name == "posix"


async def launch_process(
    args: Sequence[str],
    cwd: Optional[Path] = None,
    merge_stderr: bool = False,
) -> asyncio.subprocess.Process:
    """
    Start a command with its standard output captured.

    Standard error is discarded unless ``merge_stderr`` is set, in which case
    it is folded into the captured output. On POSIX the child gets its own
    session so that the whole process group can be killed.

    Args:
        args: Program followed by its arguments
        cwd: Working directory for the command
        merge_stderr: Capture standard error into the same stream

    Returns:
        The started asyncio subprocess

    Raises:
        ProcessLaunchError: If the program could not be started
    """
    stderr = asyncio.subprocess.STDOUT if merge_stderr else asyncio.subprocess.DEVNULL
    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=stderr,
            cwd=cwd,
            start_new_session=_IS_POSIX,
        )
    except (OSError, ValueError) as e:
        raise ProcessLaunchError(args, e) from e

    logger.debug(f"Started '{' '.join(args)}' with PID {process.pid}")
    return process


def kill_process_tree(pid: int, name: str = "process") -> None:
    """
    Forcibly kill a process and all of its descendants.

    Descendants are collected before the parent is killed so that children
    re-parented to init are still reached. Processes that have already exited
    are skipped.
    """
    if pid <= 0:
        logger.warning(f"Invalid PID {pid} for {name}, skipping kill")
        return

    try:
        parent = psutil.Process(pid)
    except psutil.NoSuchProcess:
        logger.debug(f"{name} (PID: {pid}) already terminated")
        return
    except psutil.AccessDenied:
        logger.warning(f"Access denied to {name} (PID: {pid}), sending SIGKILL directly")
        _force_kill_process(pid)
        return

    try:
        children = parent.children(recursive=True)
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        children = []

    kill_process_group(pid, name)

    for process in [parent] + children:
        try:
            process.kill()
        except psutil.NoSuchProcess:
            continue
        except psutil.AccessDenied:
            logger.warning(f"Access denied sending SIGKILL to PID {process.pid}")

    logger.debug(f"Killed {name} (PID: {pid}) and {len(children)} descendants")


def kill_process_group(pid: int, name: str = "process") -> None:
    """
    Kill the process group led by ``pid``, if there is one.

    The group outlives its leader, so this also reaches background children
    of a command that has already exited.
    """
    if not _IS_POSIX:
        return
    try:
        os.killpg(pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    except PermissionError:
        logger.debug(f"No permission to kill process group {pid} of {name}")


def _force_kill_process(pid: int) -> None:
    try:
        os.kill(pid, signal.SIGKILL if _IS_POSIX else signal.SIGTERM)
    except ProcessLookupError:
        pass
    except OSError as e:
        logger.error(f"Failed to force kill PID {pid}: {e}")


def classify_termination(returncode: Optional[int], kill_requested: bool) -> TerminationReason:
    """
    Classify how a process ended.

    A run we asked to kill is KILLED whatever its exit status, which also
    covers platforms without signal information. On POSIX a SIGKILL from any
    other source (for example the OOM killer) is reported as KILLED too.

    Args:
        returncode: The process return code; negative values are signals on POSIX
        kill_requested: Whether the supervisor requested the kill

    Returns:
        The termination reason
    """
    if kill_requested:
        return TerminationReason.KILLED
    if returncode == 0:
        return TerminationReason.EXITED_OK
    if _IS_POSIX and returncode == -signal.SIGKILL:
        return TerminationReason.KILLED
    return TerminationReason.EXITED_ERROR


def decode_output(data: Optional[bytes]) -> str:
    """Decode captured output as UTF-8, replacing undecodable bytes."""
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


def describe_command(args: List[str]) -> str:
    return " ".join(args)

"""
Reusable command slot.

A ReusableCommand owns one external process slot that is restarted over and
over. Starting it again while a previous run is still in flight kills that run
silently: a superseded run never reports a result, because whoever restarted
the command has already decided to discard its outcome.

Each completed run publishes exactly one CommandResult on the slot's bounded
``results`` queue. The put waits until the single consumer takes the result;
a run that is superseded while waiting is cancelled by the next kill, so its
result is never delivered.
"""

import asyncio
import itertools
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ..models.results import CommandResult, CommandStatus, TerminationReason
from ..system.processes import (
    classify_termination,
    decode_output,
    describe_command,
    kill_process_group,
    kill_process_tree,
    launch_process,
)
from ..validation import ProcessLaunchError

logger = logging.getLogger(__name__)


@dataclass
class _Run:
    """State of one launched run. Owned by the slot that created it."""

    run_id: int
    # None when the program could not be started.
    process: Optional[asyncio.subprocess.Process]
    task: Optional[asyncio.Task] = None
    kill_requested: bool = False


class ReusableCommand:
    """
    A command that can be started repeatedly, at most one process at a time.

    The slot lock covers killing the previous process and installing the new
    one. It is never held while waiting for a run to complete, so ``kill`` and
    ``start`` return as soon as the swap is done.
    """

    def __init__(
        self,
        name: str,
        args: Sequence[str],
        cwd: Optional[Path] = None,
        merge_stderr: bool = False,
        results: Optional[asyncio.Queue] = None,
    ):
        """
        Args:
            name: Label reported in results (e.g. "Build")
            args: Program followed by its arguments
            cwd: Working directory for every run
            merge_stderr: Fold standard error into the captured output
            results: Queue receiving results; a queue of capacity 1 by default
        """
        if not args:
            raise ValueError(f"Command '{name}' needs a program to run")
        self.name = name
        self._args = tuple(args)
        self.cwd = cwd
        self.merge_stderr = merge_stderr
        self.results: asyncio.Queue = results if results is not None else asyncio.Queue(maxsize=1)

        self._lock = asyncio.Lock()
        self._run: Optional[_Run] = None
        self._run_ids = itertools.count(1)

    def __repr__(self) -> str:
        return f"ReusableCommand(name={self.name!r}, args={list(self._args)!r})"

    @property
    def args(self) -> List[str]:
        return list(self._args)

    @property
    def current_run_id(self) -> Optional[int]:
        """Id of the run installed in the slot, None when idle or killed."""
        return self._run.run_id if self._run is not None else None

    @property
    def is_running(self) -> bool:
        """True while the current run's process has not exited."""
        run = self._run
        return (
            run is not None
            and run.process is not None
            and run.process.returncode is None
        )

    def is_current(self, result: CommandResult) -> bool:
        """Whether ``result`` was produced by the run currently in the slot."""
        return self._run is not None and result.run_id == self._run.run_id

    async def start(self) -> int:
        """
        Kill any running process of this slot, then launch a fresh one.

        Returns once the new process has been spawned; waiting for it to
        finish happens in a background task.

        Returns:
            The id of the new run
        """
        async with self._lock:
            await self._kill_locked()

            run_id = next(self._run_ids)
            try:
                process = await launch_process(
                    self._args, cwd=self.cwd, merge_stderr=self.merge_stderr
                )
            except ProcessLaunchError as e:
                logger.error(f"{self.name}: {e}")
                run = _Run(run_id=run_id, process=None)
                result = CommandResult(
                    name=self.name, output=str(e), status=CommandStatus.BAD, run_id=run_id
                )
                run.task = asyncio.create_task(
                    self._publish(result), name=f"{self.name}-run-{run_id}"
                )
            else:
                run = _Run(run_id=run_id, process=process)
                run.task = asyncio.create_task(
                    self._wait_for_completion(run), name=f"{self.name}-run-{run_id}"
                )

            self._run = run
            logger.info(f"{self.name}: started run {run_id} ({describe_command(self.args)})")
            return run_id

    async def kill(self) -> None:
        """
        Kill the running process, if any, and reset the slot.

        Calling this on an idle slot only resets it.
        """
        async with self._lock:
            await self._kill_locked()

    async def _kill_locked(self) -> None:
        run, self._run = self._run, None
        self._discard_pending_results()
        if run is None:
            return

        run.kill_requested = True
        process = run.process
        if process is not None:
            if process.returncode is None:
                logger.debug(f"{self.name}: killing run {run.run_id} (PID {process.pid})")
                kill_process_tree(process.pid, self.name)
            else:
                # The command exited but background children may still hold
                # its process group and output pipe.
                kill_process_group(process.pid, self.name)
            await process.wait()

        task = run.task
        if task is not None:
            if not task.done():
                task.cancel()
            await asyncio.wait([task])
            if not task.cancelled() and task.exception() is not None:
                logger.error(
                    f"{self.name}: run {run.run_id} failed unexpectedly: {task.exception()}"
                )

        # The run may have completed and queued its result before the kill.
        self._discard_pending_results()

    def _discard_pending_results(self) -> None:
        """Drop results queued by runs that are no longer current."""
        while True:
            try:
                stale = self.results.get_nowait()
            except asyncio.QueueEmpty:
                return
            logger.debug(f"{self.name}: discarding result of superseded run {stale.run_id}")

    async def _wait_for_completion(self, run: _Run) -> None:
        process = run.process
        stdout, _ = await process.communicate()

        reason = classify_termination(process.returncode, run.kill_requested)
        if reason is TerminationReason.KILLED:
            logger.debug(f"{self.name}: run {run.run_id} was killed, not reporting")
            return

        status = CommandStatus.OK if reason is TerminationReason.EXITED_OK else CommandStatus.BAD
        logger.info(
            f"{self.name}: run {run.run_id} finished with exit code {process.returncode}"
        )
        await self._publish(
            CommandResult(
                name=self.name,
                output=decode_output(stdout),
                status=status,
                run_id=run.run_id,
            )
        )

    async def _publish(self, result: CommandResult) -> None:
        await self.results.put(result)

"""
Build and test slots restarted as a unit.
"""

import logging
from typing import Tuple

from ..models.config import AppConfig
from .reusable_command import ReusableCommand

logger = logging.getLogger(__name__)


class Builder:
    """
    Owns the build and test commands and keeps their lifecycles in step.

    The two slots share no state; they are only restarted together, and their
    runs proceed in parallel.
    """

    def __init__(self, build_cmd: ReusableCommand, test_cmd: ReusableCommand):
        self.build_cmd = build_cmd
        self.test_cmd = test_cmd

    @classmethod
    def from_config(cls, config: AppConfig) -> "Builder":
        """Create the build and test slots described by the configuration."""
        root = config.watch.root
        merge_stderr = config.output.merge_stderr
        return cls(
            build_cmd=ReusableCommand(
                config.build.name, config.build.args, cwd=root, merge_stderr=merge_stderr
            ),
            test_cmd=ReusableCommand(
                config.test.name, config.test.args, cwd=root, merge_stderr=merge_stderr
            ),
        )

    @property
    def commands(self) -> Tuple[ReusableCommand, ReusableCommand]:
        return self.build_cmd, self.test_cmd

    async def start(self) -> None:
        """Kill both commands, then start the build and the test."""
        await self.kill()
        await self.build_cmd.start()
        await self.test_cmd.start()
        logger.debug("Builder restarted")

    async def kill(self) -> None:
        """Kill both commands, test first."""
        await self.test_cmd.kill()
        await self.build_cmd.kill()

"""
End-to-end tests for the supervisor workflow.

A real watchdog observer watches a temporary source tree; the build and test
commands are small Python programs.
"""

import asyncio

import pytest

from buildwatch.models import AppConfig, CommandConfig, CommandStatus, OutputConfig, WatchConfig
from buildwatch.orchestration import Supervisor
from buildwatch.validation import SetupError


@pytest.fixture
def source_tree(temp_dir):
    (temp_dir / "a.go").write_text("package main\n")
    return temp_dir


def make_config(root, build_args, test_args):
    return AppConfig(
        watch=WatchConfig(root=root, extensions=[".go"], health_check_interval=0.2),
        build=CommandConfig("Build", build_args),
        test=CommandConfig("Test", test_args),
        output=OutputConfig(clear_screen=True),
    )


def rendered_lines(console_output):
    return [line.rstrip() for line in console_output.buffer.getvalue().splitlines()]


@pytest.mark.e2e
@pytest.mark.slow
class TestSupervisorWorkflow:
    """Test cases for a full watch, build and display cycle."""

    @pytest.mark.asyncio
    async def test_edit_rebuilds_and_reports(self, source_tree, py, console_output, wait_for):
        config = make_config(source_tree, py("pass"), py("print('FAIL'); raise SystemExit(1)"))
        supervisor = Supervisor(config, console=console_output.console, handle_signals=False)

        run_task = asyncio.create_task(supervisor.run())
        try:
            assert await wait_for(lambda: supervisor.aggregator.redraws >= 1)
            assert rendered_lines(console_output)[:2] == ["Build ⟳:", "Test ⟳:"]

            # Initial run.
            assert await wait_for(
                lambda: supervisor.aggregator.state.build.status is CommandStatus.OK
                and supervisor.aggregator.state.test.status is CommandStatus.BAD
            )

            redraws = supervisor.aggregator.redraws
            (source_tree / "a.go").write_text("package main\n\nfunc main() {}\n")
            assert await wait_for(lambda: supervisor.aggregator.redraws > redraws)
            assert await wait_for(
                lambda: supervisor.aggregator.state.build.status is CommandStatus.OK
                and supervisor.aggregator.state.test.status is CommandStatus.BAD
            )

            assert rendered_lines(console_output)[-2:] == ["Build ✔:", "Test ✘: FAIL"]
        finally:
            supervisor.request_shutdown()
            await asyncio.wait_for(run_task, timeout=10)

        assert not supervisor.watcher.is_running
        assert not supervisor.builder.build_cmd.is_running
        assert not supervisor.builder.test_cmd.is_running

    @pytest.mark.asyncio
    async def test_non_source_files_are_ignored(self, source_tree, py, console_output, wait_for):
        config = make_config(source_tree, py("pass"), py("pass"))
        supervisor = Supervisor(config, console=console_output.console, handle_signals=False)

        run_task = asyncio.create_task(supervisor.run())
        try:
            assert await wait_for(
                lambda: supervisor.aggregator.state.test.status is CommandStatus.OK
            )
            build_run = supervisor.builder.build_cmd.current_run_id

            (source_tree / "README.md").write_text("notes\n")
            await asyncio.sleep(1.0)

            assert supervisor.builder.build_cmd.current_run_id == build_run
            assert supervisor.aggregator.state.build.status is CommandStatus.OK
        finally:
            supervisor.request_shutdown()
            await asyncio.wait_for(run_task, timeout=10)

    @pytest.mark.asyncio
    async def test_missing_root_fails_setup(self, temp_dir, py, console_output):
        config = make_config(temp_dir / "missing", py("pass"), py("pass"))
        supervisor = Supervisor(config, console=console_output.console, handle_signals=False)

        with pytest.raises(SetupError, match="cannot watch"):
            await supervisor.run()

        assert supervisor.builder.build_cmd.current_run_id is None

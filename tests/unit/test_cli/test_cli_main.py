"""
Unit tests for the command-line interface.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from buildwatch.cli.main import apply_overrides, build_parser, main_cli
from buildwatch.models import AppConfig
from buildwatch.validation import SetupError, ValidationError


def parse(*argv):
    return build_parser().parse_args(list(argv))


@pytest.fixture
def cli_env(monkeypatch, temp_dir):
    """Run the CLI from an empty directory without touching global logging."""
    monkeypatch.chdir(temp_dir)
    with patch("buildwatch.cli.main.setup_logging") as mock_logging, patch(
        "buildwatch.cli.main.run_supervisor"
    ) as mock_run:
        yield mock_run, mock_logging


@pytest.mark.unit
class TestArgumentParsing:
    """Test cases for the argument parser and overrides."""

    def test_defaults_leave_config_untouched(self):
        config = AppConfig()
        assert apply_overrides(config, parse()) == config

    def test_overrides(self, temp_dir):
        args = parse(
            "--root", str(temp_dir),
            "-e", "go", "-e", ".mod",
            "--build-cmd", "make all",
            "--test-cmd", "make 'test suite'",
            "--no-recursive",
            "--merge-stderr",
            "--no-clear",
            "--log-level", "debug",
            "--log-file", "out.log",
        )

        config = apply_overrides(AppConfig(), args)

        assert config.watch.root == temp_dir
        assert config.watch.extensions == [".go", ".mod"]
        assert config.watch.recursive is False
        assert config.build.name == "Build"
        assert config.build.args == ["make", "all"]
        assert config.test.args == ["make", "test suite"]
        assert config.output.merge_stderr is True
        assert config.output.clear_screen is False
        assert config.logging.level == "DEBUG"
        assert config.logging.file == Path("out.log")

    def test_empty_build_command_rejected(self):
        with pytest.raises(ValidationError):
            apply_overrides(AppConfig(), parse("--build-cmd", "   "))

    def test_unknown_log_level_rejected(self):
        with pytest.raises(SystemExit):
            parse("--log-level", "loud")


@pytest.mark.unit
class TestMainCli:
    """Test cases for main_cli exit behaviour."""

    def test_runs_supervisor_and_exits_zero(self, cli_env, temp_dir):
        mock_run, mock_logging = cli_env

        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--test-cmd", "make test"])

        assert exc_info.value.code == 0
        config = mock_run.call_args.args[0]
        assert config.watch.root.resolve() == temp_dir.resolve()
        assert config.test.args == ["make", "test"]
        mock_logging.assert_called_with("WARNING", None)

    def test_config_file_is_used(self, cli_env, config_file):
        mock_run, mock_logging = cli_env

        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(config_file)])

        assert exc_info.value.code == 0
        config = mock_run.call_args.args[0]
        assert config.build.name == "Compile"
        assert config.watch.extensions == [".go", ".mod"]
        mock_logging.assert_called_with("DEBUG", config_file.parent / "logs" / "buildwatch.log")

    def test_missing_root_exits_one(self, cli_env, temp_dir):
        mock_run, _ = cli_env

        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--root", str(temp_dir / "missing")])

        assert exc_info.value.code == 1
        mock_run.assert_not_called()

    def test_missing_config_file_exits_one(self, cli_env, temp_dir):
        mock_run, _ = cli_env

        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(temp_dir / "nope.toml")])

        assert exc_info.value.code == 1
        mock_run.assert_not_called()

    def test_invalid_config_file_exits_one(self, cli_env, temp_dir):
        mock_run, _ = cli_env
        bad = temp_dir / "bad.toml"
        bad.write_text('[watch]\nextensions = []\n')

        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(bad)])

        assert exc_info.value.code == 1
        mock_run.assert_not_called()

    def test_watch_setup_failure_exits_one(self, cli_env):
        mock_run, _ = cli_env
        mock_run.side_effect = SetupError("cannot watch .: inotify watch limit reached")

        with pytest.raises(SystemExit) as exc_info:
            main_cli([])

        assert exc_info.value.code == 1

    def test_interrupt_exits_zero(self, cli_env):
        mock_run, _ = cli_env
        mock_run.side_effect = KeyboardInterrupt

        with pytest.raises(SystemExit) as exc_info:
            main_cli([])

        assert exc_info.value.code == 0

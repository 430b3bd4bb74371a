"""
Command-line interface for the buildwatch rebuild supervisor.

This module provides the main CLI entry point: it parses arguments, loads and
validates the configuration, sets up logging and runs the supervisor until it
is interrupted.
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..config import get_config, set_config_path
from ..config.validators import LOG_LEVELS
from ..models.config import AppConfig, CommandConfig
from ..orchestration import run_supervisor
from ..validation import (
    SetupError,
    ValidationError,
    handle_cli_error,
    validate_command_args,
    validate_directory,
    validate_extensions,
)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def setup_logging(level: str, log_file: Optional[Path] = None) -> None:
    """
    Configure logging for the application.

    Logs go to stderr because stdout is the status display; a log file, if
    configured, receives a copy.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="buildwatch",
        description="Rebuild and retest a source tree whenever one of its files changes.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to a TOML configuration file (default: ./buildwatch.toml if present).",
    )
    parser.add_argument(
        "-r",
        "--root",
        type=str,
        help="Directory to watch; commands run in it (default: current directory).",
    )
    parser.add_argument(
        "-e",
        "--ext",
        action="append",
        dest="extensions",
        metavar="SUFFIX",
        help="Source-file suffix that triggers a rebuild; may be repeated (default: .go).",
    )
    parser.add_argument(
        "--build-cmd",
        type=str,
        help="Build command, e.g. 'go build ./...'.",
    )
    parser.add_argument(
        "--test-cmd",
        type=str,
        help="Test command, e.g. 'go test -v ./...'.",
    )
    parser.add_argument(
        "--no-recursive",
        action="store_true",
        help="Only watch the top level of the root directory.",
    )
    parser.add_argument(
        "--merge-stderr",
        action="store_true",
        help="Capture standard error together with standard output.",
    )
    parser.add_argument(
        "--no-clear",
        action="store_true",
        help="Do not clear the terminal before each redraw.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Diagnostic log level (default: WARNING).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write diagnostic logs to this file.",
    )
    return parser


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """
    Return a copy of ``config`` with command-line options applied.

    Raises:
        ValidationError: If an option value is invalid
    """
    watch = config.watch
    if args.root is not None:
        watch = dataclasses.replace(watch, root=Path(args.root))
    if args.extensions:
        watch = dataclasses.replace(
            watch, extensions=validate_extensions(args.extensions, field_name="--ext")
        )
    if args.no_recursive:
        watch = dataclasses.replace(watch, recursive=False)

    build = config.build
    if args.build_cmd is not None:
        build = CommandConfig(
            name=build.name, args=validate_command_args(args.build_cmd, field_name="--build-cmd")
        )
    test = config.test
    if args.test_cmd is not None:
        test = CommandConfig(
            name=test.name, args=validate_command_args(args.test_cmd, field_name="--test-cmd")
        )

    output = config.output
    if args.merge_stderr:
        output = dataclasses.replace(output, merge_stderr=True)
    if args.no_clear:
        output = dataclasses.replace(output, clear_screen=False)

    log_config = config.logging
    if args.log_level is not None:
        log_config = dataclasses.replace(log_config, level=args.log_level)
    if args.log_file is not None:
        log_config = dataclasses.replace(log_config, file=args.log_file)

    return AppConfig(watch=watch, build=build, test=test, output=output, logging=log_config)


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for buildwatch.

    Setup failures (bad configuration, an unwatchable root directory) exit
    immediately with status 1. Once running, the supervisor only stops on
    SIGINT/SIGTERM, after which the process exits with status 0.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # Log setup problems before the configured level is known.
    setup_logging("WARNING")

    if args.config is not None:
        set_config_path(args.config)

    try:
        app_config = apply_overrides(get_config(), args)
        validate_directory(app_config.watch.root, field_name="watch root")
    except (FileNotFoundError, ValidationError, ValueError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            logger=logger,
        )

    setup_logging(app_config.logging.level, app_config.logging.file)
    logger.info(
        f"Watching {app_config.watch.root} for {', '.join(app_config.watch.extensions)} changes"
    )

    try:
        run_supervisor(app_config)
    except SetupError as e:
        handle_cli_error(
            error=e,
            context="watcher setup",
            exit_code=1,
            logger=logger,
        )
    except KeyboardInterrupt:
        logger.info("Interrupted")

    sys.exit(0)


if __name__ == "__main__":
    main_cli()

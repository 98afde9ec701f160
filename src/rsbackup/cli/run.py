"""Run command: Execute every task of the task file."""

import argparse
import logging
import time

from .. import __util__
from ..__logger__ import create_logger
from ..config import ConfigError, TaskReader, find_config_file, open_task_file
from ..core import RunFlags, RunOptions, run_tasks
from .common import (
    EXIT_CONFIG_ERROR,
    EXIT_OK,
    EXIT_TASK_FAILED,
    get_log_level,
    prompt_bool,
)

logger = logging.getLogger(__name__)


def options_from_args(args: argparse.Namespace) -> RunOptions:
    """Build run loop options from parsed command line arguments."""
    flags = RunFlags(
        quiet=getattr(args, "quiet", False),
        debug=getattr(args, "debug", False),
        dry_run=getattr(args, "dry_run", False),
        download=getattr(args, "download", False),
    )
    return RunOptions(
        flags=flags,
        ask=getattr(args, "ask", False),
        quit_on_fail=getattr(args, "safe", False),
        up_only=getattr(args, "up_only", False),
        id_tasks=getattr(args, "id_tasks", False),
    )


def execute_run(args: argparse.Namespace) -> int:
    """Execute the run command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 when every task succeeded or was skipped, 1 when the
        task file could not be read, 2 when a task failed)
    """
    log_level = get_log_level(args)
    create_logger(level=log_level)

    options = options_from_args(args)
    if options.flags.debug:
        logger.info("Running in debug mode...")

    # Find and open the task file
    try:
        config_path = find_config_file(getattr(args, "config", None))
        if config_path is None:
            print("No configuration file found.")
            print("Create one with: rsbackup config init -o ~/.config/rsbackup/backup.conf")
            return EXIT_CONFIG_ERROR

        logger.info("Reading tasks from: %s", config_path)
        stream = open_task_file(config_path)
    except ConfigError as e:
        logger.error("Failed to read configuration file: %s", e)
        return EXIT_CONFIG_ERROR

    logger.info(__util__.log_heading(f"Started at {time.ctime()}"))

    with stream:
        reader = TaskReader(stream, source=str(config_path))
        try:
            summary = run_tasks(reader, options, confirm=prompt_bool)
        except ConfigError as e:
            logger.error("Failed to construct task: %s", e)
            return EXIT_CONFIG_ERROR

    logger.info(__util__.log_heading(f"Finished at {time.ctime()}"))

    if summary.failed:
        logger.warning(
            "Completed with errors: %d succeeded, %d failed, %d skipped",
            len(summary.succeeded),
            len(summary.failed),
            len(summary.skipped),
        )
        return EXIT_TASK_FAILED

    logger.info(
        "Backup complete: %d task(s) run, %d skipped",
        len(summary.succeeded),
        len(summary.skipped),
    )
    return EXIT_OK

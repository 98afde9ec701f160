"""List command: Show the tasks of the task file."""

import argparse
import logging

from ..__logger__ import create_logger
from ..config import ConfigError, TaskList, describe_task, find_config_file
from .common import EXIT_CONFIG_ERROR, EXIT_OK, get_log_level

logger = logging.getLogger(__name__)


def execute_list(args: argparse.Namespace) -> int:
    """Execute the list command.

    Tasks are shown even when they would fail validation, with the
    problems listed underneath.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    log_level = get_log_level(args)
    create_logger(level=log_level)

    try:
        config_path = find_config_file(getattr(args, "config", None))
        if config_path is None:
            print("No configuration file found.")
            return EXIT_CONFIG_ERROR

        tasks = TaskList(config_path)
        tasks.load()
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIG_ERROR

    if not len(tasks):
        print("No tasks yet")
        return EXIT_OK

    for label, task in zip(tasks.labels(), tasks):
        print(label)
        for line in describe_task(task):
            print(f"  {line}")
        for problem in task.problems():
            print(f"  ! {problem}")
        print("")

    return EXIT_OK

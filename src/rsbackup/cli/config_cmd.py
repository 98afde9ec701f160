"""Config command: Task file management."""

import argparse
import logging

from ..__logger__ import create_logger
from ..config import (
    ConfigError,
    TaskList,
    find_config_file,
    load_tasks,
    serialize_tasks,
    validate_tasks,
)
from ..config.loader import generate_example_config
from .common import EXIT_CONFIG_ERROR, EXIT_OK, get_log_level

logger = logging.getLogger(__name__)


def execute_config(args: argparse.Namespace) -> int:
    """Execute the config command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    log_level = get_log_level(args)
    create_logger(level=log_level)

    action = getattr(args, "config_action", None)

    if action == "validate":
        return _validate_config(args)
    elif action == "init":
        return _init_config(args)
    elif action == "format":
        return _format_config(args)
    else:
        print("Usage: rsbackup config <validate|init|format>")
        return EXIT_CONFIG_ERROR


def _validate_config(args: argparse.Namespace) -> int:
    """Validate the task file."""
    try:
        config_path = find_config_file(getattr(args, "config", None))
        if config_path is None:
            print("No configuration file found.")
            print("Searched locations:")
            print("  ~/.config/rsbackup/backup.conf")
            print("  ~/.arcutillib/backup.conf")
            print("  /etc/rsbackup/backup.conf")
            return EXIT_CONFIG_ERROR

        print(f"Validating: {config_path}")
        tasks = load_tasks(config_path)

    except ConfigError as e:
        print(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR

    updates = sum(1 for task in tasks if task.is_update)
    print("")
    print("Configuration is valid.")
    print(f"  Tasks: {len(tasks)}")
    print(f"  Update: {updates}")
    print(f"  Backup: {len(tasks) - updates}")
    return EXIT_OK


def _write_output(content: str, output) -> int:
    if output:
        try:
            with open(output, "w", encoding="utf-8") as f:
                f.write(content)
            print(f"Configuration written to: {output}")
        except OSError as e:
            print(f"Error writing file: {e}")
            return EXIT_CONFIG_ERROR
    else:
        print(content, end="")
    return EXIT_OK


def _init_config(args: argparse.Namespace) -> int:
    """Generate an example task file."""
    return _write_output(generate_example_config(), getattr(args, "output", None))


def _format_config(args: argparse.Namespace) -> int:
    """Rewrite the task file in canonical form.

    Comments and blank lines are not preserved.
    """
    try:
        config_path = find_config_file(getattr(args, "config", None))
        if config_path is None:
            print("No configuration file found.")
            return EXIT_CONFIG_ERROR

        tasks = TaskList(config_path)
        tasks.load()

        if getattr(args, "in_place", False):
            tasks.save()
            print(f"Configuration written to: {config_path}")
            return EXIT_OK

        validate_tasks(tasks)
        content = serialize_tasks(tasks)

    except ConfigError as e:
        print(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR

    return _write_output(content, getattr(args, "output", None))

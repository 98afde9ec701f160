"""CLI dispatcher.

Builds the argument parser and routes each subcommand to its handler.
"""

import argparse
import sys
from typing import Callable

from .common import EXIT_CONFIG_ERROR, EXIT_OK, add_verbosity_args


def create_subcommand_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="rsbackup",
        description="Run rsync backup and update tasks from a task file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    add_verbosity_args(parser)

    parser.add_argument(
        "-V",
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    parser.add_argument(
        "-c",
        "-f",
        "--config",
        "--conf",
        dest="config",
        metavar="FILE",
        help="Path to task file",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands (use 'command --help' for details)",
    )

    # run command
    run_parser = subparsers.add_parser(
        "run",
        help="Run every task in the task file",
        description="Run the tasks of the task file one after another",
    )
    run_parser.add_argument(
        "--ask",
        action="store_true",
        help="Ask for confirmation before every task",
    )
    run_parser.add_argument(
        "--debug",
        action="store_true",
        help="Show the rsync commands without running them",
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Let rsync show what would be transferred without changing anything",
    )
    run_parser.add_argument(
        "--up-only",
        action="store_true",
        help="Only run update tasks, skipping backup tasks",
    )
    run_parser.add_argument(
        "--id-tasks",
        action="store_true",
        help="Show each task's ID",
    )
    run_parser.add_argument(
        "-s",
        "--safe",
        action="store_true",
        help="Stop at the first failed task instead of asking",
    )
    run_parser.add_argument(
        "--download",
        action="store_true",
        help="Run update tasks in reverse, from destination to source",
    )

    # list command
    subparsers.add_parser(
        "list",
        help="Show the tasks of the task file",
        description="Summarize every task, including invalid ones",
    )

    # config command with subcommands
    config_parser = subparsers.add_parser(
        "config",
        help="Task file management",
        description="Validate, initialize, or reformat the task file",
    )
    config_subs = config_parser.add_subparsers(dest="config_action")

    config_subs.add_parser(
        "validate",
        help="Validate the task file",
    )

    init_parser = config_subs.add_parser(
        "init",
        help="Generate an example task file",
    )
    init_parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Output file (default: stdout)",
    )

    format_parser = config_subs.add_parser(
        "format",
        help="Rewrite the task file in canonical form",
    )
    format_target = format_parser.add_mutually_exclusive_group()
    format_target.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Output file (default: stdout)",
    )
    format_target.add_argument(
        "-i",
        "--in-place",
        action="store_true",
        help="Overwrite the task file",
    )

    return parser


def run_subcommand(args: argparse.Namespace) -> int:
    """Run the specified subcommand.

    Args:
        args: Parsed arguments

    Returns:
        Exit code
    """
    from .. import __version__

    if args.version:
        print(f"rsbackup {__version__}")
        return EXIT_OK

    if not args.command:
        print("No command specified. Use --help for usage information.")
        return EXIT_CONFIG_ERROR

    handlers: dict[str, Callable] = {
        "run": cmd_run,
        "list": cmd_list,
        "config": cmd_config,
    }

    handler = handlers.get(args.command)
    if handler:
        return handler(args)
    else:
        print(f"Unknown command: {args.command}")
        return EXIT_CONFIG_ERROR


def cmd_run(args: argparse.Namespace) -> int:
    """Execute run command."""
    from .run import execute_run

    return execute_run(args)


def cmd_list(args: argparse.Namespace) -> int:
    """Execute list command."""
    from .list_cmd import execute_list

    return execute_list(args)


def cmd_config(args: argparse.Namespace) -> int:
    """Execute config command."""
    from .config_cmd import execute_config

    return execute_config(args)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the rsbackup CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_subcommand_parser()
    args = parser.parse_args(argv)

    return run_subcommand(args)

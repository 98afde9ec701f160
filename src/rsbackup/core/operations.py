"""Core task operations: run_task.

Runs the rsync command composed for a task and turns its outcome into
either a normal return or a TaskFailure.
"""

import logging
import subprocess
import time
from datetime import datetime
from typing import Optional

from .. import __util__
from ..config import Task
from .invocation import RunFlags, build_command

logger = logging.getLogger(__name__)


def run_task(task: Task, flags: RunFlags, now: Optional[datetime] = None) -> list[str]:
    """Run a single task and wait for rsync to finish.

    In debug mode the command is only logged.

    Args:
        task: A validated task
        flags: Run-time switches
        now: Time used for the backup directory name (defaults to now)

    Returns:
        The command that was run (or would have been, in debug mode)

    Raises:
        TaskFailure: If the command cannot be composed or started, or rsync
            does not exit with status 0
    """
    command = build_command(task, flags, now=now)
    command_text = __util__.format_command(command)

    if flags.debug:
        logger.info("Debug mode, not executing: %s", command_text)
        return command

    logger.debug("Executing: %s", command_text)
    started = time.monotonic()
    try:
        result = subprocess.run(command, check=False)
    except OSError as e:
        raise __util__.TaskFailure(f"Failed to start {command[0]}: {e}") from e

    returncode = result.returncode
    if returncode < 0:
        raise __util__.TaskFailure(
            f"{command[0]} was terminated by signal {-returncode}, exit code unknown"
        )
    if returncode != 0:
        raise __util__.TaskFailure(
            f"{command[0]} exited with code {returncode}", returncode=returncode
        )

    logger.debug(
        "Task '%s' finished in %.1fs", task.id, time.monotonic() - started
    )
    return command

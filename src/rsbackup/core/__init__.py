"""Core task execution for rsbackup.

Composing rsync command lines, running them, and the run loop that
drives a whole task file.
"""

from .invocation import RunFlags, build_command, build_rsync_args
from .operations import run_task
from .runner import RunOptions, RunSummary, run_tasks

__all__ = [
    "RunFlags",
    "RunOptions",
    "RunSummary",
    "build_command",
    "build_rsync_args",
    "run_task",
    "run_tasks",
]

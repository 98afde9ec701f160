"""Sequential run loop over the tasks of a task file."""

import logging
from dataclasses import dataclass, field
from typing import Callable

from .. import __util__
from ..config import Task, TaskReader
from .invocation import RunFlags
from .operations import run_task

logger = logging.getLogger(__name__)

# confirm(prompt, default) -> answer
ConfirmFunc = Callable[[str, bool], bool]


@dataclass
class RunOptions:
    """Switches controlling the run loop.

    Attributes:
        flags: Switches passed on to every task invocation
        ask: Confirm every task before running it
        quit_on_fail: Stop at the first failed task without asking
        up_only: Skip backup tasks, running only update tasks
        id_tasks: Log each task's id as it is read
    """

    flags: RunFlags = field(default_factory=RunFlags)
    ask: bool = False
    quit_on_fail: bool = False
    up_only: bool = False
    id_tasks: bool = False


@dataclass
class RunSummary:
    """Outcome of a run."""

    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    stopped: bool = False

    @property
    def executed(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed


def action_label(task: Task, flags: RunFlags) -> str:
    """Verb describing what running the task will do."""
    if not task.is_update:
        return "Backup"
    return "Download" if flags.download else "Upload"


def _should_continue(error: __util__.TaskFailure, options: RunOptions, confirm: ConfirmFunc) -> bool:
    logger.error("Backup failed: %s", error)
    if options.quit_on_fail:
        return False
    if not confirm("Continue backup?", False):
        logger.warning("User canceled")
        return False
    return True


def run_tasks(
    reader: TaskReader, options: RunOptions, confirm: ConfirmFunc
) -> RunSummary:
    """Read and run tasks one at a time until the input is exhausted.

    Args:
        reader: Source of tasks, read one stanza per iteration
        options: Run loop switches
        confirm: Yes/no prompt used for confirmations

    Returns:
        Summary of the run

    Raises:
        ParseError: If a stanza cannot be parsed; the run stops at once
    """
    summary = RunSummary()
    flags = options.flags

    while True:
        task = reader.read_task()
        if task is None:
            break

        if not task.is_update and options.up_only:
            logger.debug("Skipping backup task '%s'", task.id)
            summary.skipped.append(task.id)
            continue
        logger.info("Found %s task.", task.kind)

        if options.id_tasks:
            logger.info("Task ID: %s", task.id)

        if options.ask or task.always_confirm:
            prompt = f"{action_label(task, flags)} {task.description}\nRun task?"
            if not confirm(prompt, True):
                logger.info("Skipped task '%s'", task.id)
                summary.skipped.append(task.id)
                continue

        try:
            run_task(task, flags)
        except __util__.TaskFailure as e:
            summary.failed.append(task.id)
            if not _should_continue(e, options, confirm):
                summary.stopped = True
                break
        else:
            summary.succeeded.append(task.id)

    return summary

"""Compose rsync argument lists for tasks.

The argument order is fixed so that the same task and flags always produce
the same command line; only the snapshot directory of backup tasks depends
on the wall clock.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .. import __util__
from ..config import Task

logger = logging.getLogger(__name__)

RSYNC = "rsync"

# Name of the per-run directory created under a backup task's destination
SNAPSHOT_FORMAT = "%Y-%m-%d--%H_%M"

UPDATE_MODE = "-rtu"
BACKUP_MODE = "-rt"
VERBOSE_FLAGS = ("-v", "-h", "--progress")
DRY_RUN_FLAG = "--dry-run"
EXCLUDE_DOTFILES = "--exclude=.*"
EXCLUDE_ALL = "--exclude=*"


@dataclass(frozen=True)
class RunFlags:
    """Run-time switches affecting how a task is invoked.

    Attributes:
        quiet: Leave out rsync's progress and verbosity output
        debug: Only show the command, never run it
        dry_run: Let rsync simulate the transfer
        download: Run update tasks from destination back to source
    """

    quiet: bool = False
    debug: bool = False
    dry_run: bool = False
    download: bool = False


def snapshot_name(now: Optional[datetime] = None) -> str:
    """Directory name for a backup taken at the given local time."""
    return (now or datetime.now()).strftime(SNAPSHOT_FORMAT)


def list_backup_dirs(backup_path: Optional[str]) -> list[str]:
    """Return the directories directly inside backup_path, sorted by name.

    Raises:
        TaskFailure: If no directory is set or it cannot be listed
    """
    if not backup_path:
        raise __util__.TaskFailure("No backup directory to compare with.")
    try:
        with os.scandir(backup_path) as entries:
            names = [entry.name for entry in entries if entry.is_dir()]
    except OSError as e:
        raise __util__.TaskFailure(
            f"Failed to list backup directory {backup_path}: {e}"
        ) from e
    return [os.path.join(backup_path, name) for name in sorted(names)]


def build_rsync_args(
    task: Task, flags: RunFlags, now: Optional[datetime] = None
) -> list[str]:
    """Compose the rsync arguments for a task.

    Args:
        task: A validated task
        flags: Run-time switches
        now: Time used for the backup directory name (defaults to now)

    Returns:
        Arguments to pass to rsync, source and destination last

    Raises:
        TaskFailure: If the backup directory cannot be listed
    """
    args = [EXCLUDE_DOTFILES]
    args.append(UPDATE_MODE if task.is_update else BACKUP_MODE)

    if not flags.quiet:
        args.extend(VERBOSE_FLAGS)

    if task.files_from:
        args.append(f"--files-from={task.files_from}")
    if task.exclude_from:
        args.append(f"--exclude-from={task.exclude_from}")
    if task.include_from:
        args.append(f"--include-from={task.include_from}")

    if task.exclude_others:
        args.append(EXCLUDE_ALL)

    args.extend(f"--link-dest={path}" for path in task.link_dest)
    args.extend(f"--compare-dest={path}" for path in task.compare_dest)

    if task.compare_paths and not task.is_update:
        for path in list_backup_dirs(task.backup_path):
            logger.debug("Comparing with old backup %s", path)
            args.append(f"--compare-dest={path}")

    if flags.dry_run:
        args.append(DRY_RUN_FLAG)

    src, dst = task.src, task.dst
    if task.is_update:
        if flags.download:
            src, dst = dst, src
    else:
        dst = os.path.join(dst, snapshot_name(now))
    args.extend([src, dst])

    return args


def build_command(
    task: Task, flags: RunFlags, now: Optional[datetime] = None
) -> list[str]:
    """Full command line for a task, starting with the rsync executable."""
    return [RSYNC, *build_rsync_args(task, flags, now=now)]

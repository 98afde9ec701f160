"""Editable, index-addressed collection of tasks backed by a task file."""

import logging
from pathlib import Path
from typing import Iterator, Optional

from filelock import FileLock

from .. import display_path
from .loader import load_tasks
from .schema import ConfigError, Task, task_label, validate_tasks
from .writer import serialize_tasks

logger = logging.getLogger(__name__)


class TaskList:
    """Tasks of one task file, edited by position.

    Args:
        path: Task file the list is loaded from and saved to
        tasks: Initial tasks
    """

    def __init__(self, path: Optional[Path | str] = None, tasks=None) -> None:
        self.path = Path(path) if path is not None else None
        self._tasks: list[Task] = list(tasks or [])

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def __getitem__(self, idx: int) -> Task:
        return self._tasks[idx]

    def add(self, task: Task) -> int:
        """Append a task and return its index."""
        self._tasks.append(task)
        return len(self._tasks) - 1

    def remove_at(self, idx: int) -> Task:
        """Remove and return the task at idx."""
        return self._tasks.pop(idx)

    def edit_at(self, idx: int) -> Task:
        """Take the task at idx out of the list for editing.

        The edited task is put back with add() once it is saved.
        """
        return self._tasks.pop(idx)

    def replace_at(self, idx: int, task: Task) -> None:
        self._tasks[idx] = task

    def labels(self) -> list[str]:
        return [task_label(task, i) for i, task in enumerate(self._tasks)]

    def _resolve(self, path: Optional[Path | str]) -> Path:
        if path is not None:
            return Path(path)
        if self.path is None:
            raise ConfigError("No task file specified")
        return self.path

    def load(self, path: Optional[Path | str] = None) -> None:
        """Replace the current tasks with those read from disk.

        Tasks are read without cross-field validation so that incomplete
        tasks can still be opened and fixed. The current tasks are kept if
        reading fails.
        """
        path = self._resolve(path)
        self._tasks = load_tasks(path, strict=False)
        self.path = path
        logger.info("Read %d task(s) from %s", len(self._tasks), path)

    def save(self, path: Optional[Path | str] = None) -> None:
        """Validate all tasks and write them to disk.

        Raises:
            TaskValidationError: If any task is invalid; nothing is written
            ConfigError: If the file cannot be written
        """
        path = self._resolve(path)
        validate_tasks(self._tasks)
        content = serialize_tasks(self._tasks)

        lock_path = path.with_name(path.name + ".lock")
        try:
            with FileLock(lock_path):
                path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot write config file: {e}")
        self.path = path
        logger.info("Wrote %d task(s) to %s", len(self._tasks), path)


def describe_task(task: Task) -> list[str]:
    """Human readable summary of a task, one line per property."""
    lines = ["Update task" if task.is_update else "Backup task"]
    if task.always_confirm:
        lines.append("Always asks for confirmation")

    lines.append(f"Source: {display_path(task.src)}")
    lines.append(f"Destination: {display_path(task.dst)}")

    if not task.is_update:
        lines.append(f"Backups: {display_path(task.backup_path)}")
        if task.compare_paths:
            lines.append("Compares with all other backups")

    if task.exclude_others:
        lines.append("Ignores all unincluded files")

    if task.link_dest:
        lines.append("Links:")
        lines.extend(f"- {path}" for path in task.link_dest)
    if task.compare_dest:
        lines.append("Compared paths:")
        lines.extend(f"- {path}" for path in task.compare_dest)

    if task.exclude_from:
        lines.append(f"Exclude patterns: {task.exclude_from}")
    if task.include_from:
        lines.append(f"Include patterns: {task.include_from}")
    if task.files_from:
        lines.append(f"Filename patterns: {task.files_from}")
    return lines

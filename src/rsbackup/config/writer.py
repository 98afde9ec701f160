"""Render tasks back into the stanza format read by TaskReader."""

from typing import Iterable

from .loader import (
    BACKUP_TAG,
    COMPARE_TAG,
    CONFIRM_TAG,
    END_TAG,
    EXCLUDE_OTHERS_TAG,
    UPDATE_TAG,
)
from .schema import Task, TaskValidationError

# Emission order for single-valued keys
_SCALAR_ORDER = (
    ("ID", "id"),
    ("SRC", "src"),
    ("DST", "dst"),
    ("EXFR", "exclude_from"),
    ("INFR", "include_from"),
    ("FIFR", "files_from"),
    ("BPATH", "backup_path"),
)


def serialize_task(task: Task) -> str:
    """Render a task as one stanza, terminated by a newline.

    Raises:
        TaskValidationError: If the task would produce an unreadable stanza
    """
    if task.compare_paths and not task.backup_path:
        raise TaskValidationError(
            "Cannot write a task that compares with old backups without a backup path."
        )
    problems = task.stanza_problems()
    if problems:
        raise TaskValidationError(f"Cannot write task {task.id!r}: {problems[0]}")

    lines = [UPDATE_TAG if task.is_update else BACKUP_TAG]

    for key, attr in _SCALAR_ORDER:
        value = getattr(task, attr)
        if value:
            lines.append(f"{key}={value}")

    lines.extend(f"CDST={path}" for path in task.compare_dest)
    lines.extend(f"LDST={path}" for path in task.link_dest)

    if task.exclude_others:
        lines.append(EXCLUDE_OTHERS_TAG)
    if task.always_confirm:
        lines.append(CONFIRM_TAG)
    if task.compare_paths:
        lines.append(COMPARE_TAG)

    lines.append(END_TAG)
    return "\n".join(lines) + "\n"


def serialize_tasks(tasks: Iterable[Task]) -> str:
    """Render several tasks into the content of a task file."""
    return "".join(serialize_task(task) for task in tasks)

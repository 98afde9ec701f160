"""Task definitions using dataclasses.

A task file holds a sequence of stanzas, each describing one rsync job.
Paths are kept exactly as written: rsync treats a trailing slash on the
source as "copy the contents", so they must not be normalised.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .. import display_path

DEFAULT_TASK_ID = "New Task"

# Fields written as one KEY=value line each
TEXT_FIELDS = (
    "id",
    "src",
    "dst",
    "backup_path",
    "exclude_from",
    "include_from",
    "files_from",
)
# Fields written as one KEY=value line per entry
LIST_FIELDS = ("link_dest", "compare_dest")


class ConfigError(Exception):
    """Configuration loading or validation error."""

    pass


class TaskValidationError(ConfigError):
    """A task violates one of its cross-field invariants."""

    pass


@dataclass
class Task:
    """One backup or update job.

    Attributes:
        id: Human readable task name
        is_update: True for a plain mirror job, False for a timestamped backup
        always_confirm: Ask before running even when not globally requested
        src: Path handed to rsync as the source
        dst: Path handed to rsync as the destination
        backup_path: Directory holding earlier backups (backup tasks only)
        compare_paths: Compare against every backup found in backup_path
        link_dest: Directories passed as --link-dest, in order
        compare_dest: Directories passed as --compare-dest, in order
        exclude_others: Exclude everything not explicitly included
        exclude_from: File with exclude patterns
        include_from: File with include patterns
        files_from: File listing the files to transfer
    """

    id: str = DEFAULT_TASK_ID
    is_update: bool = True
    always_confirm: bool = False
    src: Optional[str] = None
    dst: Optional[str] = None
    backup_path: Optional[str] = None
    compare_paths: bool = False
    link_dest: list[str] = field(default_factory=list)
    compare_dest: list[str] = field(default_factory=list)
    exclude_others: bool = False
    exclude_from: Optional[str] = None
    include_from: Optional[str] = None
    files_from: Optional[str] = None

    @property
    def kind(self) -> str:
        return "update" if self.is_update else "backup"

    @property
    def description(self) -> str:
        """Source and destination, as shown in confirmation prompts."""
        return f"{display_path(self.src)} -> {display_path(self.dst)}"

    def problems(self) -> list[str]:
        """Return a message for every invariant this task violates."""
        problems = []
        if not self.src:
            problems.append("No source path specified.")
        if not self.dst:
            problems.append("No destination path specified.")
        if self.is_update:
            if self.backup_path:
                problems.append("Update tasks cannot have a backup path.")
            if self.compare_paths:
                problems.append("Update tasks cannot compare with old backups.")
        if self.compare_paths and not self.backup_path:
            problems.append("Comparing with old backups requires a backup path.")
        problems.extend(self.stanza_problems())
        return problems

    def stanza_problems(self) -> list[str]:
        """Return a message for every value that cannot be written as one line."""
        problems = []
        for attr in TEXT_FIELDS:
            value = getattr(self, attr)
            if value and _has_line_break(value):
                problems.append(f"Value of {attr} must be a single line.")
        for attr in LIST_FIELDS:
            for entry in getattr(self, attr):
                if not entry:
                    problems.append(f"Empty entry in {attr}.")
                elif _has_line_break(entry):
                    problems.append(f"Entry of {attr} must be a single line.")
        return problems

    def validate(self) -> None:
        """Check the task invariants.

        Raises:
            TaskValidationError: naming the first violated invariant
        """
        problems = self.problems()
        if problems:
            raise TaskValidationError(problems[0])


def _has_line_break(value: str) -> bool:
    return "\n" in value or "\r" in value

def task_label(task: Task, index: int) -> str:
    """Name a task for messages, falling back to its 1-based position."""
    return task.id if task.id else f"(Task #{index + 1})"


def validate_tasks(tasks: Iterable[Task]) -> None:
    """Validate every task of a list before it is trusted or persisted.

    Raises:
        TaskValidationError: prefixed with the offending task's label
    """
    for i, task in enumerate(tasks):
        try:
            task.validate()
        except TaskValidationError as e:
            raise TaskValidationError(f"{task_label(task, i)}: {e}") from e

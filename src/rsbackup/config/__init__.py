"""Task file handling for rsbackup.

This module provides the stanza-format task file reader and writer,
the task schema and its validation, and an editable task list.
"""

from .loader import (
    ParseError,
    TaskReader,
    find_config_file,
    load_tasks,
    open_task_file,
)
from .schema import ConfigError, Task, TaskValidationError, validate_tasks
from .tasklist import TaskList, describe_task
from .writer import serialize_task, serialize_tasks

__all__ = [
    "Task",
    "TaskList",
    "TaskReader",
    "describe_task",
    "find_config_file",
    "load_tasks",
    "open_task_file",
    "serialize_task",
    "serialize_tasks",
    "validate_tasks",
    "ConfigError",
    "ParseError",
    "TaskValidationError",
]

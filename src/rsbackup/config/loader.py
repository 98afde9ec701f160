"""Task file discovery and parsing.

A task file is a sequence of stanzas::

    [BACKUP]
    ID=Photos
    SRC=/home/me/photos/
    DST=/mnt/backup/photos
    BPATH=/mnt/backup/photos
    [COMPARE BPATH]
    [END]

The reader walks the stream forward one stanza at a time, so the run loop can
execute each task before the next one is even read.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, TextIO

from .schema import ConfigError, Task, TaskValidationError

logger = logging.getLogger(__name__)

BACKUP_TAG = "[BACKUP]"
UPDATE_TAG = "[UPDATE]"
END_TAG = "[END]"
CONFIRM_TAG = "[CONFIRM]"
COMPARE_TAG = "[COMPARE BPATH]"
EXCLUDE_OTHERS_TAG = "[EXCLUDE OTHERS]"

# Single-valued keys; a repeated key overwrites the earlier value
SCALAR_KEYS = {
    "ID=": "id",
    "SRC=": "src",
    "DST=": "dst",
    "BPATH=": "backup_path",
    "EXFR=": "exclude_from",
    "INFR=": "include_from",
    "FIFR=": "files_from",
}

# Repeatable keys, appended in file order
LIST_KEYS = {
    "CDST=": "compare_dest",
    "LDST=": "link_dest",
}

FLAG_TAGS = {
    CONFIRM_TAG: "always_confirm",
    COMPARE_TAG: "compare_paths",
    EXCLUDE_OTHERS_TAG: "exclude_others",
}

# Only meaningful for backup tasks
BACKUP_ONLY = frozenset({"BPATH=", COMPARE_TAG})

# Config file search paths in priority order
CONFIG_PATHS = [
    Path.home() / ".config" / "rsbackup" / "backup.conf",
    Path.home() / ".arcutillib" / "backup.conf",
    Path("/etc/rsbackup/backup.conf"),
]


class ParseError(ConfigError):
    """A stanza could not be parsed.

    Attributes:
        source: Name of the stream being read
        lineno: 1-based line number of the offending line
    """

    def __init__(self, message: str, source: str = "<stream>", lineno: int = 0):
        self.message = message
        self.source = source
        self.lineno = lineno
        super().__init__(f"{source}:{lineno}: {message}")


class _State(Enum):
    """Position of the reader within a stanza."""

    AWAIT_TYPE_TAG = "await_type_tag"
    READING_FIELDS = "reading_fields"
    DONE = "done"


def _is_skippable(line: str) -> bool:
    return not line.strip() or line.startswith("#")


class TaskReader:
    """Read tasks one stanza at a time from a text stream.

    Args:
        stream: Text stream positioned at the start of a stanza
        source: Name used in error messages
        strict: Run the full task validation when a stanza closes
    """

    def __init__(self, stream: TextIO, source: str = "<stream>", strict: bool = True):
        self._stream = stream
        self.source = source
        self.strict = strict
        self.lineno = 0

    def __iter__(self) -> Iterator[Task]:
        while True:
            task = self.read_task()
            if task is None:
                return
            yield task

    def _error(self, message: str, lineno: Optional[int] = None) -> ParseError:
        return ParseError(
            message, self.source, self.lineno if lineno is None else lineno
        )

    def _next_line(self) -> Optional[str]:
        """Return the next line without its terminator, or None at end of input."""
        try:
            raw = self._stream.readline()
        except UnicodeDecodeError as e:
            raise self._error(f"Invalid text encoding: {e}", self.lineno + 1)
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}")
        if not raw:
            return None
        self.lineno += 1
        if raw.endswith("\r\n"):
            return raw[:-2]
        if raw.endswith("\n"):
            return raw[:-1]
        return raw

    def read_task(self) -> Optional[Task]:
        """Parse the next stanza.

        Returns:
            The parsed task, or None when the input holds no further tasks

        Raises:
            ParseError: If the stanza is malformed or truncated
        """
        task = Task()
        state = _State.AWAIT_TYPE_TAG
        start = 0

        while state is not _State.DONE:
            line = self._next_line()
            if line is None:
                if state is _State.AWAIT_TYPE_TAG:
                    return None
                raise self._error(
                    f"Unexpected end of file in task starting at line {start}; "
                    f"missing {END_TAG}."
                )
            if _is_skippable(line):
                continue

            if state is _State.AWAIT_TYPE_TAG:
                if line == BACKUP_TAG:
                    task.is_update = False
                elif line != UPDATE_TAG:
                    raise self._error(
                        f"Could not find task: expected {BACKUP_TAG} or "
                        f"{UPDATE_TAG}, found '{line}'."
                    )
                start = self.lineno
                state = _State.READING_FIELDS
            elif line == END_TAG:
                state = _State.DONE
            else:
                self._apply_line(task, line)

        self._finish(task, start)
        logger.debug("Read %s task '%s' from %s:%d", task.kind, task.id, self.source, start)
        return task

    def _apply_line(self, task: Task, line: str) -> None:
        """Apply one field or tag line to the task being read."""
        for prefix, attr in SCALAR_KEYS.items():
            if line.startswith(prefix):
                self._check_allowed(task, prefix)
                value = line[len(prefix):]
                if value:
                    setattr(task, attr, value)
                return

        for prefix, attr in LIST_KEYS.items():
            if line.startswith(prefix):
                value = line[len(prefix):]
                if value:
                    getattr(task, attr).append(value)
                return

        attr = FLAG_TAGS.get(line)
        if attr is None:
            raise self._error(f"Unexpected line '{line}' in configuration.")
        self._check_allowed(task, line)
        setattr(task, attr, True)

    def _check_allowed(self, task: Task, key: str) -> None:
        if task.is_update and key in BACKUP_ONLY:
            what = "parameter" if key.endswith("=") else "tag"
            raise self._error(
                f"Unexpected {key.rstrip('=')} {what} in update task configuration."
            )

    def _finish(self, task: Task, start: int) -> None:
        """Checks applied once the closing tag has been read."""
        if task.compare_paths and not task.backup_path:
            raise self._error(
                f"{COMPARE_TAG} requires a BPATH in task starting at line {start}."
            )
        if self.strict:
            try:
                task.validate()
            except TaskValidationError as e:
                raise self._error(f"Invalid task starting at line {start}: {e}")


def find_config_file(explicit_path: str | None = None) -> Path | None:
    """Find the task file.

    Args:
        explicit_path: Explicitly specified task file (highest priority)

    Returns:
        Path to the task file, or None if not found
    """
    if explicit_path:
        path = Path(explicit_path).expanduser()
        if path.exists():
            return path
        raise ConfigError(f"Config file not found: {explicit_path}")

    for path in CONFIG_PATHS:
        if path.exists():
            return path

    return None


def open_task_file(path: Path | str) -> TextIO:
    """Open a task file for reading.

    Raises:
        ConfigError: If the file cannot be opened
    """
    try:
        return open(path, encoding="utf-8-sig")
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}")


def load_tasks(path: Path | str, strict: bool = True) -> list[Task]:
    """Read every task in a task file.

    Args:
        path: Path to the task file
        strict: Validate each task as it is read

    Returns:
        Tasks in file order

    Raises:
        ConfigError: If the file cannot be read or a stanza is invalid
    """
    with open_task_file(path) as stream:
        return list(TaskReader(stream, source=str(path), strict=strict))


def generate_example_config() -> str:
    """Generate example task file content."""
    return """# rsbackup task file
# Tasks run top to bottom. Lines starting with '#' are ignored.

# Mirror a project directory to a file server.
[UPDATE]
ID=Projects
SRC=/home/user/projects/
DST=/mnt/server/projects
EXFR=/home/user/.config/rsbackup/projects.exclude
[END]

# Timestamped backup of documents. Each run creates a new
# YYYY-MM-DD--HH_MM directory under DST; unchanged files found
# in earlier backups under BPATH are not copied again.
[BACKUP]
ID=Documents
SRC=/home/user/documents/
DST=/mnt/backup/documents
BPATH=/mnt/backup/documents
[COMPARE BPATH]
[CONFIRM]
[END]

# Only the listed files, hard-linked against a reference copy.
# [BACKUP]
# ID=Dotfiles
# SRC=/home/user/
# DST=/mnt/backup/dotfiles
# FIFR=/home/user/.config/rsbackup/dotfiles.list
# LDST=/mnt/backup/dotfiles/reference
# [EXCLUDE OTHERS]
# [END]
"""

# pyright: standard

"""rsbackup: rsbackup/__util__.py
Common utility code shared among the modules.
"""

import shlex
from typing import Optional, Sequence


class AbortError(Exception):
    """Exception where the current run should be stopped."""


class TaskFailure(AbortError):
    """A single task could not be carried out.

    Attributes:
        returncode: Exit status of the transfer tool, or None when it is
            unknown (spawn failure, killed by a signal, I/O error)
    """

    def __init__(self, message: str, returncode: Optional[int] = None) -> None:
        super().__init__(message)
        self.returncode = returncode

    @property
    def exit_code_text(self) -> str:
        return "unknown" if self.returncode is None else str(self.returncode)


def log_heading(caption: str) -> str:
    """Formatted heading for logging output sections."""
    return f"--[ {caption} ]--"


def format_command(command: Sequence[str]) -> str:
    """Render an argument list the way a shell user would type it."""
    return shlex.join(command)

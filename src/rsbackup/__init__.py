"""rsbackup: rsbackup/__init__.py."""

from typing import Optional


__version__ = "0.3.0"


def display_path(path: Optional[str]) -> str:
    """Return a printable form of an optional path, empty when unset."""
    return "" if path is None else str(path)

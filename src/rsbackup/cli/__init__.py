"""Command line interface for rsbackup."""

from .dispatcher import main

__all__ = ["main"]

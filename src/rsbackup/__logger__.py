# pyright: standard

"""rsbackup: rsbackup/__logger__.py
A common logger writing through a rich console.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

# Initialize basic console and handler
cons = Console(stderr=True)
rich_handler = RichHandler(console=cons, show_path=False)
# Parent of every module logger in the package
logger = logging.getLogger("rsbackup")


def create_logger(level="INFO", console: Optional[Console] = None) -> None:
    """Helper function to setup logging for a command.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        console: Console to write to, a fresh stderr console when omitted
    """
    # pylint: disable=global-statement
    global cons, rich_handler

    cons = console or Console(stderr=True)
    rich_handler = RichHandler(console=cons, show_path=False)

    logger.setLevel(level)

    logging.basicConfig(
        format="%(message)s",
        datefmt="%H:%M:%S",
        level=level,
        handlers=[rich_handler],
        force=True,
    )

"""rsbackup: rsbackup/__main__.py.

Run rsync backup and update tasks described in a task file.
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())

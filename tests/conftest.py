"""Pytest configuration and shared fixtures."""

import io
import subprocess

import pytest

from rsbackup.config import Task, TaskReader


@pytest.fixture
def tmp_config_dir(tmp_path):
    """Create a temporary config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def sample_tasks_conf():
    """Return a sample valid task file with one task of each kind."""
    return """# rsbackup tasks

[UPDATE]
ID=Projects
SRC=/home/user/projects/
DST=/mnt/server/projects
EXFR=/home/user/projects.exclude
[END]

[BACKUP]
ID=Documents
SRC=/home/user/documents/
DST=/mnt/backup/documents
BPATH=/mnt/backup/documents
LDST=/mnt/reference
[COMPARE BPATH]
[CONFIRM]
[END]
"""


@pytest.fixture
def config_file(tmp_config_dir, sample_tasks_conf):
    """Create a temporary task file with sample content."""
    config_path = tmp_config_dir / "backup.conf"
    config_path.write_text(sample_tasks_conf)
    return config_path


@pytest.fixture
def make_reader():
    """Return a factory building a TaskReader over a string."""

    def _make(text, strict=True):
        return TaskReader(io.StringIO(text), source="test.conf", strict=strict)

    return _make


@pytest.fixture
def update_task():
    """A minimal valid update task."""
    return Task(id="Mirror", src="/x", dst="/y")


@pytest.fixture
def backup_task():
    """A minimal valid backup task."""
    return Task(id="Snapshot", is_update=False, src="/a", dst="/b")


@pytest.fixture
def completed():
    """Return a factory for CompletedProcess results with a given exit code."""

    def _completed(returncode=0):
        return subprocess.CompletedProcess(args=["rsync"], returncode=returncode)

    return _completed

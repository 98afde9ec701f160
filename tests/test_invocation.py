"""Tests for composing rsync command lines."""

import os
import re
from datetime import datetime

import pytest

from rsbackup.__util__ import TaskFailure
from rsbackup.config.schema import Task
from rsbackup.core.invocation import (
    RSYNC,
    RunFlags,
    build_command,
    build_rsync_args,
    list_backup_dirs,
    snapshot_name,
)

NOW = datetime(2024, 3, 9, 7, 5)


class TestUpdateArgs:
    """Tests for update task arguments."""

    def test_dry_run_scenario(self, make_reader):
        task = make_reader("[UPDATE]\nSRC=/x\nDST=/y\n[END]\n").read_task()
        args = build_rsync_args(task, RunFlags(quiet=False, dry_run=True))

        assert args == [
            "--exclude=.*",
            "-rtu",
            "-v",
            "-h",
            "--progress",
            "--dry-run",
            "/x",
            "/y",
        ]

    def test_quiet_leaves_out_progress(self, update_task):
        args = build_rsync_args(update_task, RunFlags(quiet=True))
        assert args == ["--exclude=.*", "-rtu", "/x", "/y"]

    def test_download_swaps_paths(self, update_task):
        args = build_rsync_args(update_task, RunFlags(quiet=True, download=True))
        assert args[-2:] == ["/y", "/x"]

    def test_no_timestamp_for_update(self, update_task):
        args = build_rsync_args(update_task, RunFlags(), now=NOW)
        assert args[-1] == "/y"


class TestBackupArgs:
    """Tests for backup task arguments."""

    def test_mode_and_timestamped_destination(self, backup_task):
        args = build_rsync_args(backup_task, RunFlags(quiet=True), now=NOW)
        assert args == ["--exclude=.*", "-rt", "/a", os.path.join("/b", "2024-03-09--07_05")]

    def test_download_does_not_apply(self, backup_task):
        args = build_rsync_args(backup_task, RunFlags(quiet=True, download=True), now=NOW)
        assert args[-2] == "/a"

    def test_destination_uses_current_time(self, backup_task):
        before = datetime.now().replace(second=0, microsecond=0)
        args = build_rsync_args(backup_task, RunFlags())
        after = datetime.now()

        name = os.path.basename(args[-1])
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}--\d{2}_\d{2}", name)
        stamp = datetime.strptime(name, "%Y-%m-%d--%H_%M")
        assert before <= stamp <= after

    def test_compare_backup_path_scenario(self, tmp_path, make_reader):
        backups = tmp_path / "backups"
        backups.mkdir()
        (backups / "2021-01-01").mkdir()
        (backups / "notadir").write_text("x")

        text = f"[BACKUP]\nSRC=/a\nDST=/b\nBPATH={backups}\n[COMPARE BPATH]\n[END]\n"
        task = make_reader(text).read_task()
        args = build_rsync_args(task, RunFlags(), now=NOW)

        compare = [a for a in args if a.startswith("--compare-dest=")]
        assert compare == [f"--compare-dest={backups / '2021-01-01'}"]

    def test_compare_dirs_sorted(self, tmp_path, backup_task):
        for name in ("2022-06-01--10_00", "2021-01-01--09_30", "2023-12-31--23_59"):
            (tmp_path / name).mkdir()
        backup_task.backup_path = str(tmp_path)
        backup_task.compare_paths = True

        args = build_rsync_args(backup_task, RunFlags(quiet=True), now=NOW)
        assert args[2:5] == [
            f"--compare-dest={tmp_path / '2021-01-01--09_30'}",
            f"--compare-dest={tmp_path / '2022-06-01--10_00'}",
            f"--compare-dest={tmp_path / '2023-12-31--23_59'}",
        ]

    def test_unlistable_backup_path(self, tmp_path, backup_task):
        backup_task.backup_path = str(tmp_path / "missing")
        backup_task.compare_paths = True
        with pytest.raises(TaskFailure, match="Failed to list backup directory") as exc_info:
            build_rsync_args(backup_task, RunFlags(), now=NOW)
        assert exc_info.value.returncode is None

    def test_compare_without_backup_path(self, tmp_path, monkeypatch, backup_task):
        """Test that an unset backup path never lists the working directory."""
        (tmp_path / "cwd-dir").mkdir()
        monkeypatch.chdir(tmp_path)
        backup_task.compare_paths = True
        with pytest.raises(TaskFailure, match="No backup directory"):
            build_rsync_args(backup_task, RunFlags(), now=NOW)

    def test_backup_path_alone_adds_nothing(self, tmp_path, backup_task):
        (tmp_path / "old").mkdir()
        backup_task.backup_path = str(tmp_path)
        args = build_rsync_args(backup_task, RunFlags(quiet=True), now=NOW)
        assert not any(a.startswith("--compare-dest=") for a in args)


class TestArgumentOrder:
    """Tests for the relative order of optional arguments."""

    def test_full_order(self, tmp_path):
        (tmp_path / "prev").mkdir()
        task = Task(
            is_update=False,
            src="/a",
            dst="/b",
            backup_path=str(tmp_path),
            compare_paths=True,
            link_dest=["/l1", "/l2"],
            compare_dest=["/c1"],
            exclude_others=True,
            exclude_from="/ex",
            include_from="/in",
            files_from="/files",
        )
        args = build_rsync_args(task, RunFlags(dry_run=True), now=NOW)

        assert args == [
            "--exclude=.*",
            "-rt",
            "-v",
            "-h",
            "--progress",
            "--files-from=/files",
            "--exclude-from=/ex",
            "--include-from=/in",
            "--exclude=*",
            "--link-dest=/l1",
            "--link-dest=/l2",
            "--compare-dest=/c1",
            f"--compare-dest={tmp_path / 'prev'}",
            "--dry-run",
            "/a",
            os.path.join("/b", "2024-03-09--07_05"),
        ]

    def test_deterministic(self, update_task):
        update_task.link_dest = ["/l"]
        update_task.exclude_from = "/ex"
        flags = RunFlags(dry_run=True)
        assert build_rsync_args(update_task, flags) == build_rsync_args(update_task, flags)


class TestHelpers:
    """Tests for module helpers."""

    def test_build_command_prefixes_rsync(self, update_task):
        command = build_command(update_task, RunFlags(quiet=True))
        assert command[0] == RSYNC == "rsync"
        assert command[1:] == build_rsync_args(update_task, RunFlags(quiet=True))

    def test_snapshot_name(self):
        assert snapshot_name(datetime(2021, 12, 31, 23, 59, 59)) == "2021-12-31--23_59"

    def test_list_backup_dirs_skips_files(self, tmp_path):
        (tmp_path / "b").mkdir()
        (tmp_path / "a").mkdir()
        (tmp_path / "file").write_text("")
        assert list_backup_dirs(str(tmp_path)) == [
            str(tmp_path / "a"),
            str(tmp_path / "b"),
        ]

    def test_run_flags_defaults(self):
        flags = RunFlags()
        assert not (flags.quiet or flags.debug or flags.dry_run or flags.download)

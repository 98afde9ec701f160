"""Tests for rendering tasks as stanzas."""

import io

import pytest

from rsbackup.config.loader import TaskReader
from rsbackup.config.schema import Task, TaskValidationError
from rsbackup.config.writer import serialize_task, serialize_tasks


def _reparse(text):
    return list(TaskReader(io.StringIO(text)))


class TestSerializeTask:
    """Tests for serialize_task."""

    def test_minimal_update(self, update_task):
        assert serialize_task(update_task) == "[UPDATE]\nID=Mirror\nSRC=/x\nDST=/y\n[END]\n"

    def test_field_order(self):
        task = Task(
            id="Full",
            is_update=False,
            always_confirm=True,
            src="/a",
            dst="/b",
            backup_path="/old",
            compare_paths=True,
            link_dest=["/l1", "/l2"],
            compare_dest=["/c1"],
            exclude_others=True,
            exclude_from="/ex",
            include_from="/in",
            files_from="/files",
        )
        assert serialize_task(task).splitlines() == [
            "[BACKUP]",
            "ID=Full",
            "SRC=/a",
            "DST=/b",
            "EXFR=/ex",
            "INFR=/in",
            "FIFR=/files",
            "BPATH=/old",
            "CDST=/c1",
            "LDST=/l1",
            "LDST=/l2",
            "[EXCLUDE OTHERS]",
            "[CONFIRM]",
            "[COMPARE BPATH]",
            "[END]",
        ]

    def test_unset_fields_omitted(self, backup_task):
        backup_task.id = ""
        text = serialize_task(backup_task)
        assert "ID=" not in text
        assert "BPATH=" not in text
        assert "[CONFIRM]" not in text

    def test_compare_without_backup_path_fails(self, backup_task):
        backup_task.compare_paths = True
        with pytest.raises(TaskValidationError):
            serialize_task(backup_task)

    @pytest.mark.parametrize("value", ["/a\nb", "/a\r"])
    def test_line_break_fails(self, update_task, value):
        update_task.src = value
        with pytest.raises(TaskValidationError, match="single line"):
            serialize_task(update_task)

    def test_line_break_in_list_entry_fails(self, backup_task):
        backup_task.link_dest = ["/ref\n[END]"]
        with pytest.raises(TaskValidationError, match="single line"):
            serialize_task(backup_task)

    def test_empty_list_entry_fails(self, backup_task):
        backup_task.compare_dest = ["/old", ""]
        with pytest.raises(TaskValidationError, match="Empty entry in compare_dest"):
            serialize_task(backup_task)

    def test_serialize_tasks_concatenates(self, update_task, backup_task):
        text = serialize_tasks([update_task, backup_task])
        assert text == serialize_task(update_task) + serialize_task(backup_task)


class TestRoundTrip:
    """Tests that written stanzas read back to equal tasks."""

    def test_update_task(self, update_task):
        assert _reparse(serialize_task(update_task)) == [update_task]

    def test_backup_task_with_lists_and_flags(self):
        task = Task(
            id="Photos",
            is_update=False,
            always_confirm=True,
            src="/home/me/photos/",
            dst="/mnt/backup/photos",
            backup_path="/mnt/backup/photos",
            compare_paths=True,
            link_dest=["/ref", "/ref"],
            compare_dest=["/one", "/two"],
            exclude_others=True,
            include_from="/etc/photos.include",
        )
        assert _reparse(serialize_task(task)) == [task]

    def test_several_tasks(self, update_task, backup_task):
        tasks = [update_task, backup_task, update_task]
        assert _reparse(serialize_tasks(tasks)) == tasks

    def test_empty_list_entry_cannot_round_trip(self):
        """Test that a list entry lost on reading is refused up front."""
        task = Task(id="T", is_update=False, src="/a", dst="/b", link_dest=["", "/r"])
        assert "Empty entry in link_dest." in task.problems()
        with pytest.raises(TaskValidationError):
            serialize_task(task)

    def test_every_written_task_reads_back(self, update_task, backup_task):
        for task in (update_task, backup_task):
            task.src = "/with spaces/ and = signs/"
            assert task.problems() == []
            assert _reparse(serialize_task(task)) == [task]

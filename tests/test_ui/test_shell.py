"""Tests for the interactive shell commands."""

from datetime import date

import pytest
from rich.console import Console

from todoboard.models import Priority, ViewMode
from todoboard.session import Session
from todoboard.ui.shell import Shell, ShellError, split_fields


class ManualTimer:
    def __init__(self, delay, fn):
        pass

    def start(self):
        pass

    def cancel(self):
        pass


@pytest.fixture
def shell(store):
    console = Console(record=True, width=200)
    return Shell(Session(store=store, timer_factory=ManualTimer), console)


def output(shell) -> str:
    return shell.console.export_text()


def texts(shell) -> list[str]:
    return [t.text for t in shell.session.visible_tasks()]


class TestSplitFields:
    def test_separates_fields(self):
        words, fields = split_fields(["Buy", "milk", "priority=high", "due=2024-01-05"])
        assert words == ["Buy", "milk"]
        assert fields == {"priority": Priority.HIGH, "due_date": date(2024, 1, 5)}

    def test_unknown_key_is_text(self):
        words, fields = split_fields(["a=b"])
        assert words == ["a=b"]
        assert fields == {}


class TestTaskCommands:
    def test_add(self, shell):
        assert shell.execute("add Buy milk category=Shopping priority=high") is True
        task = shell.store.tasks[0]
        assert (task.text, task.category, task.priority) == ("Buy milk", "Shopping", Priority.HIGH)
        assert "Added: Buy milk" in output(shell)
        assert shell.store.state.adding is False

    def test_add_empty_text_reports_error(self, shell):
        shell.execute("add priority=low")
        assert len(shell.store) == 0
        assert "Error:" in output(shell)

    def test_edit(self, shell):
        shell.execute("add Old")
        shell.execute('edit 1 "text=New name" due=2024-02-01')
        task = shell.store.tasks[0]
        assert task.text == "New name"
        assert task.due_date == date(2024, 2, 1)
        assert shell.store.state.editing_task_id is None

    def test_edit_rejects_free_text(self, shell):
        shell.execute("add Old")
        shell.execute("edit 1 oops")
        assert "Expected field=value" in output(shell)

    def test_done_toggles(self, shell):
        shell.execute("add A")
        shell.execute("done 1")
        assert shell.store.tasks[0].completed is True
        shell.execute("done 1")
        assert shell.store.tasks[0].completed is False

    def test_rm_by_id_prefix(self, shell):
        shell.execute("add A")
        shell.execute("add B")
        shell.execute("rm t0002")
        assert texts(shell) == ["A"]

    def test_dup(self, shell):
        shell.execute("add A")
        shell.execute("dup 1")
        assert texts(shell) == ["A", "A (copy)"]

    def test_move(self, shell):
        for name in "ABC":
            shell.execute(f"add {name}")
        shell.execute("move 1 3")
        assert texts(shell) == ["B", "C", "A"]

    def test_unknown_row(self, shell):
        shell.execute("done 4")
        assert "No row 4" in output(shell)

    def test_ambiguous_prefix(self, shell):
        shell.execute("add A")
        shell.execute("add B")
        with pytest.raises(ShellError, match="Ambiguous"):
            shell.resolve("t000")


class TestViewCommands:
    def test_search(self, shell):
        shell.execute("add milk")
        shell.execute("add bread")
        shell.execute("search mil")
        assert texts(shell) == ["milk"]
        shell.execute("search")
        assert len(texts(shell)) == 2

    def test_filter_and_clear(self, shell):
        shell.execute("add A category=Work")
        shell.execute("add B")
        shell.execute("filter category Uncategorized")
        assert texts(shell) == ["B"]
        shell.execute("filter clear")
        assert texts(shell) == ["A", "B"]

    def test_filter_priority_none(self, shell):
        shell.execute("add A priority=high")
        shell.execute("add B")
        shell.execute("filter priority none")
        assert texts(shell) == ["B"]

    def test_bad_status_leaves_filters_alone(self, shell):
        shell.execute("add A")
        shell.execute("filter status maybe")
        assert "Status must be" in output(shell)
        assert texts(shell) == ["A"]

    def test_sort(self, shell):
        shell.execute("add b")
        shell.execute("add a")
        shell.execute("sort text")
        assert texts(shell) == ["a", "b"]

    def test_view(self, shell):
        shell.execute("view board")
        assert shell.store.state.view == ViewMode.BOARD
        shell.execute("view gallery")
        assert "Unknown view" in output(shell)

    def test_paging(self, shell):
        shell.execute("per-page 2")
        for i in range(5):
            shell.execute(f"add Task{i}")
        shell.execute("page 9")
        assert shell.session.page == 3
        shell.execute("prev")
        assert shell.session.page == 2
        assert "3 - 4 of 5" in output(shell)

    def test_unknown_command(self, shell):
        shell.execute("fly")
        assert "Unknown command 'fly'" in output(shell)

    def test_quit(self, shell):
        assert shell.execute("quit") is False
        assert shell.execute("q") is False


class TestFileCommands:
    def test_import_appends(self, shell, tmp_path):
        shell.execute("add Existing")
        path = tmp_path / "in.csv"
        path.write_text("Task,Status\nImported,Completed\n")
        shell.execute(f"import {path}")
        assert texts(shell) == ["Existing", "Imported"]
        assert [t.order for t in shell.store.tasks] == [0, 1]

    def test_import_non_utf8_file(self, shell, tmp_path):
        path = tmp_path / "in.csv"
        path.write_bytes(b"\xff\xfe")
        shell.execute(f"import {path}")
        assert "not a UTF-8 text file" in output(shell)
        assert len(shell.store) == 0

    def test_sort_created_after_import_with_offsets(self, shell, tmp_path):
        shell.execute("add Local")
        path = tmp_path / "in.csv"
        path.write_text("Task,Status,Category,Priority,Due Date,Due Time,Created At\nSynced,,,,,,2023-06-01T09:00:00+02:00\n")
        shell.execute(f"import {path}")
        shell.execute("sort created")
        assert texts(shell) == ["Synced", "Local"]

    def test_import_missing_file(self, shell, tmp_path):
        shell.execute(f"import {tmp_path / 'nope.csv'}")
        assert "File not found" in output(shell)

    def test_export_to_file(self, shell, tmp_path):
        shell.execute("add A")
        path = tmp_path / "out.csv"
        shell.execute(f"export {path}")
        assert path.read_text().splitlines()[1].startswith('"A",Incomplete')

    def test_export_empty(self, shell):
        shell.execute("export")
        assert "No tasks to export" in output(shell)

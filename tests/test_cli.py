"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from todoboard.cli import app
from todoboard.csvio import sample_csv

runner = CliRunner()


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "tasks.csv"
    path.write_text(sample_csv())
    return path


class TestCliSample:
    def test_prints_template(self):
        result = runner.invoke(app, ["sample"])
        assert result.exit_code == 0
        assert result.stdout.startswith("Task,Status,Category")
        assert "Complete project documentation,Incomplete,Work,High" in result.stdout

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "show" in result.stdout


class TestCliShow:
    def test_list_view(self, sample_file):
        result = runner.invoke(app, ["show", str(sample_file)])
        assert result.exit_code == 0, result.output
        assert "Exercise" in result.stdout
        assert "1 - 5 of 5" in result.stdout

    def test_per_page(self, sample_file):
        result = runner.invoke(app, ["show", str(sample_file), "-n", "2", "-p", "3"])
        assert result.exit_code == 0, result.output
        assert "5 - 5 of 5" in result.stdout

    def test_status_filter(self, sample_file):
        result = runner.invoke(app, ["show", str(sample_file), "--status", "complete", "-f", "csv"])
        assert result.exit_code == 0, result.output
        lines = result.stdout.strip().splitlines()
        assert len(lines) == 2
        assert lines[1].startswith('"Buy groceries",Completed')

    def test_search_and_sort(self, sample_file):
        result = runner.invoke(
            app, ["show", str(sample_file), "-s", "o", "--sort", "text", "-f", "jsonl"]
        )
        assert result.exit_code == 0, result.output
        texts = [json.loads(line)["text"] for line in result.stdout.splitlines()]
        assert texts == ["Buy groceries", "Complete project documentation", "Review quarterly reports"]

    def test_category_filter(self, sample_file):
        result = runner.invoke(app, ["show", str(sample_file), "-c", "Health", "-f", "csv"])
        assert result.exit_code == 0, result.output
        assert "Exercise" in result.stdout
        assert "Buy groceries" not in result.stdout

    def test_board_view(self, sample_file):
        result = runner.invoke(app, ["show", str(sample_file), "--view", "board"])
        assert result.exit_code == 0, result.output
        assert "Shopping" in result.stdout

    def test_calendar_view(self, sample_file):
        result = runner.invoke(app, ["show", str(sample_file), "-f", "calendar:2024-01"])
        assert result.exit_code == 0, result.output
        assert "January 2024" in result.stdout

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["show", str(tmp_path / "nope.csv")])
        assert result.exit_code == 1
        assert "File not found" in result.stdout

    def test_bad_sort(self, sample_file):
        result = runner.invoke(app, ["show", str(sample_file), "--sort", "random"])
        assert result.exit_code == 1
        assert "Unknown sort" in result.stdout

    def test_bad_category(self, sample_file):
        result = runner.invoke(app, ["show", str(sample_file), "-c", "Garden"])
        assert result.exit_code == 1

    def test_sort_created_with_offset_timestamps(self, tmp_path):
        path = tmp_path / "tasks.csv"
        path.write_text(
            "Task,Status,Category,Priority,Due Date,Due Time,Created At\n"
            "Synced,Incomplete,,,,,2024-01-01T09:00:00+00:00\n"
            "Local,Incomplete,,,,,\n"
        )
        result = runner.invoke(app, ["show", str(path), "--sort", "created", "-f", "csv"])
        assert result.exit_code == 0, result.output
        assert "Synced" in result.stdout
        assert "Local" in result.stdout

    def test_non_utf8_file(self, tmp_path):
        path = tmp_path / "tasks.csv"
        path.write_bytes(b"\xff\xfeT\x00a\x00")
        for command in ("show", "export"):
            result = runner.invoke(app, [command, str(path)])
            assert result.exit_code == 1
            assert "Error:" in result.stdout
            assert "UTF-8" in result.stdout

    def test_bad_csv_names_line(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("Task,Status,Category,Priority,Due Date\nA,Incomplete,Work,High,soon\n")
        result = runner.invoke(app, ["show", str(path)])
        assert result.exit_code == 1
        assert "Line 2" in result.stdout


class TestCliExport:
    def test_normalizes_file(self, tmp_path):
        path = tmp_path / "tasks.csv"
        path.write_text("Task\nWater plants\n")
        result = runner.invoke(app, ["export", str(path)])
        assert result.exit_code == 0, result.output
        assert '"Water plants",Incomplete,Uncategorized,Medium,No due date,No due time,' in result.stdout

    def test_empty_file(self, tmp_path):
        path = tmp_path / "tasks.csv"
        path.write_text("Task\n")
        result = runner.invoke(app, ["export", str(path)])
        assert result.exit_code == 0
        assert "No tasks to export" in result.stdout


class TestCliConfig:
    def test_lists_settings(self):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "items_per_page" in result.stdout


class TestCliShell:
    def test_runs_commands_from_stdin(self):
        result = runner.invoke(app, ["shell"], input="add Buy milk priority=high\nls\nquit\n")
        assert result.exit_code == 0, result.output
        assert "Added: Buy milk" in result.stdout

    def test_no_command_starts_shell(self):
        result = runner.invoke(app, [], input="quit\n")
        assert result.exit_code == 0, result.output
        assert "type 'help'" in result.stdout

    def test_shell_with_file(self, sample_file):
        result = runner.invoke(app, ["shell", str(sample_file)], input="filter category Work\nquit\n")
        assert result.exit_code == 0, result.output
        assert "quarterly" in result.stdout
        assert "Exercise" not in result.stdout


class TestCliConfigValues:
    def test_read_one(self):
        result = runner.invoke(app, ["config", "items_per_page"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "25"

    def test_set_and_reset(self):
        result = runner.invoke(app, ["config", "items_per_page", "50"])
        assert result.exit_code == 0, result.output
        assert "items_per_page = 50" in result.stdout

        result = runner.invoke(app, ["config", "items_per_page", "--reset"])
        assert result.exit_code == 0, result.output
        assert "items_per_page = 25" in result.stdout

    def test_set_invalid(self):
        result = runner.invoke(app, ["config", "default_view", "gallery"])
        assert result.exit_code == 1
        assert "Invalid default_view" in result.stdout

    def test_unknown_key(self):
        result = runner.invoke(app, ["config", "colour"])
        assert result.exit_code == 1

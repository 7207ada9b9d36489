"""CSV import and export for bulk task transfer.

Columns: Task, Status, Category, Priority, Due Date, Due Time, Created At

Missing values are written as sentinel strings ("Uncategorized",
"No due date", "No due time") and read back as absent.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time

from todoboard.models import CATEGORIES, UNCATEGORIZED, Priority, Task
from todoboard.store import generate_task_id

logger = logging.getLogger("todoboard.csvio")

HEADERS = ["Task", "Status", "Category", "Priority", "Due Date", "Due Time", "Created At"]

COMPLETED = "Completed"
INCOMPLETE = "Incomplete"
NO_DUE_DATE = "No due date"
NO_DUE_TIME = "No due time"
DEFAULT_PRIORITY = Priority.MEDIUM
IMPORTED_PLACEHOLDER = "Imported task"

SAMPLE_ROWS = [
    ["Complete project documentation", INCOMPLETE, "Work", "High", "2024-01-15", "14:30", "2024-01-01"],
    ["Buy groceries", COMPLETED, "Shopping", "Medium", "2024-01-10", "", "2024-01-01"],
    ["Exercise", INCOMPLETE, "Health", "Low", "2024-01-12", "18:00", "2024-01-01"],
    ["Review quarterly reports", INCOMPLETE, "Work", "High", "2024-01-20", "09:00", "2024-01-01"],
    ["Call dentist", INCOMPLETE, "Health", "Medium", "2024-01-25", "", "2024-01-01"],
]


class CsvImportError(ValueError):
    """Raised when a CSV row cannot be turned into a task."""

    def __init__(self, line: int, message: str):
        self.line = line
        super().__init__(f"Line {line}: {message}")


@dataclass(frozen=True)
class ImportedRow:
    """One parsed CSV row, not yet a Task (no id or order)."""

    text: str
    completed: bool = False
    category: str | None = None
    priority: Priority | None = DEFAULT_PRIORITY
    due_date: date | None = None
    due_time: time | None = None
    created_at: datetime | None = None


def _cell(values: list[str], index: int) -> str:
    return values[index].strip() if index < len(values) else ""


def _parse_category(value: str) -> str | None:
    if not value or value == UNCATEGORIZED:
        return None
    if value not in CATEGORIES:
        logger.warning("Unknown category %r imported as %s", value, UNCATEGORIZED)
        return None
    return value


def _parse_priority(value: str, line: int) -> Priority:
    if not value:
        return DEFAULT_PRIORITY
    try:
        return Priority(value.lower())
    except ValueError:
        valid = ", ".join(p.value for p in Priority)
        raise CsvImportError(line, f"Invalid priority {value!r}. Valid: {valid}") from None


def _parse_due_date(value: str, line: int) -> date | None:
    if not value or value == NO_DUE_DATE:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise CsvImportError(line, f"Invalid due date {value!r}, expected YYYY-MM-DD") from None


def _parse_due_time(value: str, line: int) -> time | None:
    if not value or value == NO_DUE_TIME:
        return None
    try:
        return time.fromisoformat(value)
    except ValueError:
        raise CsvImportError(line, f"Invalid due time {value!r}, expected HH:MM") from None


def _parse_created_at(value: str) -> datetime | None:
    # Exports from other tools may carry locale dates here; those fall back to now
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        logger.debug("Unparseable Created At %r, using import time", value)
        return None
    # Tasks created locally carry naive local times; offsets are folded into them
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_csv(text: str) -> list[ImportedRow]:
    """Parse CSV text (header row first) into rows.

    Blank lines are skipped. Raises CsvImportError on malformed values.
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    rows: list[ImportedRow] = []
    header_seen = False
    for values in reader:
        line = reader.line_num
        if not any(v.strip() for v in values):
            continue
        if not header_seen:
            header_seen = True
            continue
        rows.append(
            ImportedRow(
                text=_cell(values, 0) or IMPORTED_PLACEHOLDER,
                completed=_cell(values, 1).lower() == COMPLETED.lower(),
                category=_parse_category(_cell(values, 2)),
                priority=_parse_priority(_cell(values, 3), line),
                due_date=_parse_due_date(_cell(values, 4), line),
                due_time=_parse_due_time(_cell(values, 5), line),
                created_at=_parse_created_at(_cell(values, 6)),
            )
        )
    return rows


def build_import(
    existing: Sequence[Task],
    rows: Iterable[ImportedRow],
    clock: Callable[[], datetime] = datetime.now,
    id_factory: Callable[[], str] = generate_task_id,
) -> list[Task]:
    """Append imported rows after the existing tasks.

    New tasks get fresh ids and consecutive order values starting at
    len(existing).
    """
    result = list(existing)
    taken = {t.id for t in existing}
    now = clock()
    for row in rows:
        new_id = id_factory()
        while new_id in taken:
            new_id = id_factory()
        taken.add(new_id)
        result.append(
            Task(
                id=new_id,
                text=row.text,
                completed=row.completed,
                category=row.category,
                priority=row.priority,
                due_date=row.due_date,
                due_time=row.due_time,
                order=len(result),
                created_at=row.created_at or now,
            )
        )
    return result


def _export_row(task: Task) -> list[str]:
    return [
        '"' + task.text.replace('"', '""') + '"',
        COMPLETED if task.completed else INCOMPLETE,
        task.category or UNCATEGORIZED,
        (task.priority or DEFAULT_PRIORITY).value.capitalize(),
        task.due_date.isoformat() if task.due_date else NO_DUE_DATE,
        task.due_time.strftime("%H:%M") if task.due_time else NO_DUE_TIME,
        task.created_at.date().isoformat(),
    ]


def export_csv(tasks: Iterable[Task]) -> str:
    """Render tasks as CSV. The Task column is always quoted."""
    lines = [",".join(HEADERS)]
    lines.extend(",".join(_export_row(task)) for task in tasks)
    return "\n".join(lines)


def sample_csv() -> str:
    """A small template file showing the expected columns."""
    return "\n".join(",".join(row) for row in [HEADERS, *SAMPLE_ROWS])

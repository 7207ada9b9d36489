"""Rich table formatter for the list view."""

from datetime import date
from typing import Any

from rich.table import Table

from todoboard.models import Task
from todoboard.pipeline import Page


class TableFormatter:
    """Format tasks as a Rich table, one row per task.

    When given a Page, rows are numbered by their position in the whole view
    and the caption shows the "1 - 25 of 60" range.
    """

    NAME = "list"

    def __init__(
        self,
        date_format: str = "%Y-%m-%d",
        show_id: bool = False,
        today: date | None = None,
    ):
        self.date_format = date_format
        self.show_id = show_id
        self.today = today

    def _format_created(self, task: Task) -> str:
        try:
            return task.created_at.strftime(self.date_format)
        except ValueError:
            return task.created_at.strftime("%Y-%m-%d")

    def format(self, items: list[Task], page: Page | None = None) -> Any:
        from todoboard.ui.formatting import format_category, format_due, format_priority

        if not items:
            return "[dim]No tasks[/dim]"

        today = self.today or date.today()
        has_priority = any(t.priority for t in items)
        has_category = any(t.category for t in items)
        has_due = any(t.due_date for t in items)

        table = Table(show_header=True, header_style="bold")
        if page is not None:
            table.caption = caption_for(page)

        if page is not None:
            table.add_column("#", justify="right", style="dim")
        if self.show_id:
            table.add_column("ID", style="dim")
        table.add_column("Done", width=6)
        if has_priority:
            table.add_column("Pri", width=4)
        table.add_column("Task")
        if has_category:
            table.add_column("Category")
        if has_due:
            table.add_column("Due")
        table.add_column("Created", style="dim")

        for position, task in enumerate(items):
            # Colorblind-safe: blue checkmark for done
            status = "[blue]✓[/blue]" if task.completed else "[dim]•[/dim]"
            text = f"[dim strike]{task.text}[/dim strike]" if task.completed else task.text

            row = []
            if page is not None:
                row.append(str(page.start_index + position + 1))
            if self.show_id:
                row.append(task.id)
            row.append(status)
            if has_priority:
                row.append(format_priority(task.priority))
            row.append(text)
            if has_category:
                row.append(format_category(task.category))
            if has_due:
                row.append(format_due(task.due_date, task.due_time, today, task.completed))
            row.append(self._format_created(task))

            table.add_row(*row)

        return table


def caption_for(page: Page) -> str:
    """'start - end of total', 1-based, plus page position."""
    if page.total_items == 0:
        return "0 of 0"
    return (
        f"{page.start_index + 1} - {page.end_index} of {page.total_items}"
        f"  (page {page.page}/{page.total_pages})"
    )

"""Kanban board formatter: one column per category."""

from datetime import date
from typing import Any

from rich.columns import Columns
from rich.table import Table

from todoboard.models import CATEGORIES, Task
from todoboard.pipeline import group_by_category


class BoardFormatter:
    """Format tasks as side-by-side category columns.

    Columns appear in category order with Uncategorized last. Empty columns
    are hidden unless show_empty is set.
    """

    NAME = "board"

    def __init__(self, show_empty: bool = False, today: date | None = None):
        self.show_empty = show_empty
        self.today = today

    def _column(self, name: str, tasks: list[Task], today: date) -> Table:
        from todoboard.ui.formatting import format_due, format_priority

        color = CATEGORIES.get(name, "white")
        table = Table(
            title=f"[{color} bold]{name}[/{color} bold] [dim]({len(tasks)})[/dim]",
            show_header=False,
            min_width=22,
        )
        table.add_column("Task")
        if not tasks:
            table.add_row("[dim]No tasks[/dim]")
        for task in tasks:
            mark = "[blue]✓[/blue]" if task.completed else "[dim]•[/dim]"
            line = f"{mark} {task.text}"
            prio = format_priority(task.priority)
            if prio:
                line += f" {prio}"
            due = format_due(task.due_date, task.due_time, today, task.completed)
            if due:
                line += f"\n  {due}"
            table.add_row(line)
        return table

    def format(self, items: list[Task]) -> Any:
        if not items:
            return "[dim]No tasks[/dim]"

        today = self.today or date.today()
        columns = [
            self._column(name, tasks, today)
            for name, tasks in group_by_category(items).items()
            if tasks or self.show_empty
        ]
        return Columns(columns, equal=True)

"""Month calendar formatter."""

import calendar
from datetime import date
from typing import Any

from rich.table import Table

from todoboard.models import CATEGORIES, Task
from todoboard.pipeline import group_by_due_date

MAX_TASKS_PER_DAY = 3


class CalendarFormatter:
    """Format tasks as a month grid placed by due date.

    Weeks start on Sunday. Tasks without a due date are counted in the
    caption but not placed.
    """

    NAME = "calendar"

    def __init__(self, month: date | None = None, today: date | None = None):
        self.today = today or date.today()
        self.month = (month or self.today).replace(day=1)

    def _cell(self, day: date, tasks: list[Task]) -> str:
        if day.month != self.month.month:
            return f"[dim]{day.day}[/dim]"
        header = f"[reverse]{day.day}[/reverse]" if day == self.today else f"[bold]{day.day}[/bold]"
        lines = [header]
        for task in tasks[:MAX_TASKS_PER_DAY]:
            color = CATEGORIES.get(task.category or "", "cyan")
            prefix = f"{task.due_time.strftime('%H:%M')} " if task.due_time else ""
            style = f"{color} strike" if task.completed else color
            lines.append(f"[{style}]{prefix}{task.text}[/{style}]")
        if len(tasks) > MAX_TASKS_PER_DAY:
            lines.append(f"[dim]+{len(tasks) - MAX_TASKS_PER_DAY} more[/dim]")
        return "\n".join(lines)

    def format(self, items: list[Task]) -> Any:
        by_day = group_by_due_date(items)
        undated = sum(1 for t in items if t.due_date is None)

        table = Table(
            title=self.month.strftime("%B %Y"),
            show_lines=True,
            expand=True,
        )
        cal = calendar.Calendar(firstweekday=calendar.SUNDAY)
        for weekday in cal.iterweekdays():
            table.add_column(calendar.day_abbr[weekday], ratio=1, overflow="fold")

        for week in cal.monthdatescalendar(self.month.year, self.month.month):
            table.add_row(*(self._cell(day, by_day.get(day, [])) for day in week))

        if undated:
            table.caption = f"{undated} task{'s' if undated != 1 else ''} without a due date"
        return table

"""Shared formatting utilities for priority, category and due date display."""

from __future__ import annotations

from datetime import date, time

from todoboard.models import CATEGORIES, UNCATEGORIZED, Priority

# Priority indicators (Rich markup)
PRIORITY_INDICATORS: dict[str, str] = {
    "high": "[red bold]!![/red bold]",
    "medium": "[yellow]![/yellow]",
    "low": "[dim]↓[/dim]",
}

# Due dates within this many days are shown relative to today
RELATIVE_DAYS = 7


def format_priority(priority: Priority | None) -> str:
    """Format priority as a Rich markup indicator."""
    if not priority:
        return ""
    return PRIORITY_INDICATORS.get(priority.value, "")


def format_category(category: str | None) -> str:
    """Category name in its board color."""
    if not category:
        return f"[dim]{UNCATEGORIZED}[/dim]"
    color = CATEGORIES.get(category, "white")
    return f"[{color}]{category}[/{color}]"


def describe_due(due_date: date, due_time: time | None, today: date) -> tuple[str, str]:
    """Human text and Rich style for a due date.

    Near dates read relative to today ("Today", "Tomorrow", "Friday",
    "3 days ago"); anything further out shows as "Jan 5". Past dates are red.
    """
    delta = (due_date - today).days
    at = f" at {due_time.strftime('%H:%M')}" if due_time else ""

    if -RELATIVE_DAYS <= delta <= RELATIVE_DAYS:
        if delta < 0:
            days = -delta
            return f"{days} day{'s' if days > 1 else ''} ago{at}", "red"
        if delta == 0:
            return f"Today{at}", "red"
        if delta == 1:
            return f"Tomorrow{at}", "dark_orange"
        return f"{due_date.strftime('%A')}{at}", "blue"

    label = f"{due_date.strftime('%b')} {due_date.day}{at}"
    return label, "red" if delta < 0 else "dim"


def format_due(
    due_date: date | None,
    due_time: time | None,
    today: date,
    completed: bool = False,
) -> str:
    """Due date as Rich markup. Completed tasks are always dimmed."""
    if not due_date:
        return ""
    text, style = describe_due(due_date, due_time, today)
    if completed:
        style = "dim"
    return f"[{style}]{text}[/{style}]"

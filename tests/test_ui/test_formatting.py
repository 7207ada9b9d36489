"""Tests for shared display formatting."""

from datetime import date, time

import pytest

from todoboard.models import Priority
from todoboard.ui.formatting import describe_due, format_category, format_due, format_priority

TODAY = date(2024, 1, 10)  # a Wednesday


@pytest.mark.parametrize(
    "due,expected",
    [
        (date(2024, 1, 10), ("Today", "red")),
        (date(2024, 1, 11), ("Tomorrow", "dark_orange")),
        (date(2024, 1, 12), ("Friday", "blue")),
        (date(2024, 1, 17), ("Wednesday", "blue")),
        (date(2024, 1, 9), ("1 day ago", "red")),
        (date(2024, 1, 5), ("5 days ago", "red")),
        (date(2024, 1, 18), ("Jan 18", "dim")),
        (date(2023, 12, 25), ("Dec 25", "red")),
    ],
)
def test_describe_due(due, expected):
    assert describe_due(due, None, TODAY) == expected


def test_describe_due_with_time():
    text, _ = describe_due(date(2024, 1, 10), time(14, 30), TODAY)
    assert text == "Today at 14:30"


def test_format_due_completed_is_dimmed():
    assert format_due(date(2024, 1, 10), None, TODAY, completed=True) == "[dim]Today[/dim]"


def test_format_due_without_date():
    assert format_due(None, time(9, 0), TODAY) == ""


def test_format_priority():
    assert "!!" in format_priority(Priority.HIGH)
    assert format_priority(None) == ""


def test_format_category():
    assert format_category("Work") == "[blue]Work[/blue]"
    assert "Uncategorized" in format_category(None)

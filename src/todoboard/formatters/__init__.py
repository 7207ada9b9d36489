"""Output formatters for the list, board and calendar views."""

from .base import FormatterProtocol
from .board import BoardFormatter
from .calendar_view import CalendarFormatter
from .csv import CsvFormatter
from .jsonl import JsonlFormatter
from .table import TableFormatter

FORMATTERS: dict[str, type] = {
    "list": TableFormatter,
    "board": BoardFormatter,
    "calendar": CalendarFormatter,
    "csv": CsvFormatter,
    "jsonl": JsonlFormatter,
}

DEFAULT_DATE_FMT = "%Y-%m-%d"


def get_formatter(format_str: str) -> FormatterProtocol:
    """Parse format string and return configured formatter.

    Format string syntax: <name>:<option>:<option>

    Examples:
        "list"            -> TableFormatter()
        "list:%d.%m."     -> TableFormatter(date_format="%d.%m.")
        "list::id"        -> TableFormatter(show_id=True)
        "board::empty"    -> BoardFormatter(show_empty=True)
        "calendar:2024-01" -> CalendarFormatter(month=date(2024, 1, 1))
        "csv"             -> CsvFormatter()
    """
    from datetime import date

    parts = format_str.split(":")
    name = parts[0]

    if name not in FORMATTERS:
        available = list(FORMATTERS.keys())
        raise ValueError(f"Unknown format: {name}. Available: {', '.join(available)}")
    cls = FORMATTERS[name]
    options = parts[1:]

    if name == "list":
        date_format = options[0] if options and options[0] else DEFAULT_DATE_FMT
        show_id = len(options) > 1 and options[1] == "id"
        return cls(date_format=date_format, show_id=show_id)

    if name == "board":
        return cls(show_empty="empty" in options)

    if name == "calendar" and options and options[0]:
        try:
            month = date.fromisoformat(f"{options[0]}-01")
        except ValueError:
            raise ValueError(f"Invalid month: {options[0]}. Use YYYY-MM") from None
        return cls(month=month)

    return cls()


__all__ = [
    "FormatterProtocol",
    "TableFormatter",
    "BoardFormatter",
    "CalendarFormatter",
    "CsvFormatter",
    "JsonlFormatter",
    "FORMATTERS",
    "get_formatter",
]

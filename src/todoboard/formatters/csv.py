"""CSV formatter using the import/export column layout."""

from todoboard.models import Task


class CsvFormatter:
    """Format tasks as CSV with headers.

    Columns: Task, Status, Category, Priority, Due Date, Due Time, Created At
    """

    NAME = "csv"

    def format(self, items: list[Task]) -> str:
        from todoboard.csvio import export_csv

        return export_csv(items)

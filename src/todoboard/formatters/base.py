"""Formatter protocol shared by every output format."""

from typing import Any, Protocol, runtime_checkable

from todoboard.models import Task


@runtime_checkable
class FormatterProtocol(Protocol):
    """Turns an already-derived task list into something `console.print` accepts.

    Formatters never filter or sort; they render what the pipeline hands them.
    The list formatter also takes an optional Page for its caption.
    """

    NAME: str

    def format(self, items: list[Task]) -> Any: ...

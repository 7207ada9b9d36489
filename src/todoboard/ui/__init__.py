"""UI module."""

from .formatting import format_category, format_due, format_priority
from .shell import Shell

__all__ = [
    "Shell",
    "format_category",
    "format_due",
    "format_priority",
]

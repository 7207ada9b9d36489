"""Move-and-renumber helpers for drag-and-drop reordering."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from todoboard.models import Task


def index_of(tasks: Sequence[Task], task_id: str) -> int | None:
    """Position of task_id in tasks, or None if absent."""
    for i, task in enumerate(tasks):
        if task.id == task_id:
            return i
    return None


def move(tasks: Sequence[Task], from_index: int, to_index: int) -> list[Task]:
    """Return a new list with the element at from_index reinserted at to_index.

    Raises:
        IndexError: If either index is outside 0..len(tasks)-1
    """
    size = len(tasks)
    if not (0 <= from_index < size and 0 <= to_index < size):
        raise IndexError(f"Reorder indices out of range: {from_index} -> {to_index} (size {size})")
    moved = list(tasks)
    item = moved.pop(from_index)
    moved.insert(to_index, item)
    return moved


def renumber(tasks: Sequence[Task]) -> list[Task]:
    """Assign order = position. Tasks already in place are reused as-is."""
    return [t if t.order == i else replace(t, order=i) for i, t in enumerate(tasks)]


def reorder(tasks: Sequence[Task], from_index: int, to_index: int) -> list[Task]:
    """Move then renumber."""
    return renumber(move(tasks, from_index, to_index))

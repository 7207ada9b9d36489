"""Derived-view pipeline: search, filter, sort, paginate.

Every stage is a pure function over a sequence of tasks so that surfaces can
pick the stages they need. The list view runs all of them; the board and
calendar views stop after filtering and group the result instead.
"""

from __future__ import annotations

import math
from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum

from todoboard.models import (
    CATEGORIES,
    UNCATEGORIZED,
    Priority,
    StatusFilter,
    Task,
    priority_rank,
)


class SortKey(Enum):
    """Field a view is sorted by."""

    ORDER = "order"
    TEXT = "text"
    CREATED_AT = "created_at"
    DUE_DATE = "due_date"
    PRIORITY = "priority"


# UI sort presets -> (key, descending)
SORT_PRESETS: dict[str, tuple[SortKey, bool]] = {
    "default": (SortKey.ORDER, False),
    "text": (SortKey.TEXT, False),
    "created": (SortKey.CREATED_AT, False),
    "priority-high": (SortKey.PRIORITY, True),
    "priority-low": (SortKey.PRIORITY, False),
    "dueDate-newest": (SortKey.DUE_DATE, True),
    "dueDate-oldest": (SortKey.DUE_DATE, False),
}


def parse_sort_preset(name: str) -> tuple[SortKey, bool]:
    """Resolve a preset name like 'priority-high' to (key, descending)."""
    try:
        return SORT_PRESETS[name]
    except KeyError:
        available = ", ".join(SORT_PRESETS)
        raise ValueError(f"Unknown sort: {name}. Available: {available}") from None


@dataclass(frozen=True)
class ViewQuery:
    """Inputs to the pipeline. Empty selections mean no restriction."""

    search: str = ""
    statuses: frozenset[StatusFilter] = field(default_factory=frozenset)
    categories: frozenset[str] = field(default_factory=frozenset)
    priorities: frozenset[Priority | None] = field(default_factory=frozenset)
    sort_key: SortKey = SortKey.ORDER
    descending: bool = False


@dataclass(frozen=True)
class Page:
    """One slice of a sorted, filtered sequence."""

    items: tuple[Task, ...]
    page: int
    page_size: int
    total_items: int
    total_pages: int
    start_index: int
    end_index: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


# --- Stage 1-3: filters ---


def filter_by_search(tasks: Iterable[Task], term: str) -> list[Task]:
    """Case-insensitive substring match on text."""
    if not term:
        return list(tasks)
    needle = term.lower()
    return [t for t in tasks if needle in t.text.lower()]


def filter_by_status(tasks: Iterable[Task], statuses: Collection[StatusFilter]) -> list[Task]:
    """Keep tasks whose completion state is selected."""
    if not statuses or len(set(statuses)) == len(StatusFilter):
        return list(tasks)
    want_complete = StatusFilter.COMPLETE in statuses
    return [t for t in tasks if t.completed == want_complete]


def filter_by_category(tasks: Iterable[Task], categories: Collection[str]) -> list[Task]:
    """Keep tasks in the selected categories.

    An empty selection passes everything. UNCATEGORIZED selects tasks with no
    category.
    """
    if not categories:
        return list(tasks)
    return [t for t in tasks if (t.category or UNCATEGORIZED) in categories]


def filter_by_priority(
    tasks: Iterable[Task], priorities: Collection[Priority | None]
) -> list[Task]:
    """Keep tasks with a selected priority. None in the selection matches unset."""
    if not priorities:
        return list(tasks)
    return [t for t in tasks if t.priority in priorities]


def apply_filters(tasks: Iterable[Task], query: ViewQuery) -> list[Task]:
    """Stages 1-3."""
    result = filter_by_search(tasks, query.search)
    result = filter_by_status(result, query.statuses)
    result = filter_by_category(result, query.categories)
    return filter_by_priority(result, query.priorities)


# --- Stage 4: sort ---


def _sort_value(task: Task, key: SortKey):
    if key == SortKey.TEXT:
        return task.text.lower()
    if key == SortKey.CREATED_AT:
        return task.created_at
    if key == SortKey.DUE_DATE:
        return task.due_date or date.max
    if key == SortKey.PRIORITY:
        return priority_rank(task.priority)
    return task.order


def sort_tasks(
    tasks: Iterable[Task], key: SortKey = SortKey.ORDER, descending: bool = False
) -> list[Task]:
    """Stable sort by a single key.

    sorted() with reverse=True keeps equal elements in their original order,
    so ties are stable in both directions.
    """
    return sorted(tasks, key=lambda t: _sort_value(t, key), reverse=descending)


def derive(tasks: Iterable[Task], query: ViewQuery) -> list[Task]:
    """Stages 1-4: the full filtered, sorted view."""
    return sort_tasks(apply_filters(tasks, query), query.sort_key, query.descending)


# --- Stage 5: paginate ---


def total_pages_for(total_items: int, page_size: int) -> int:
    return math.ceil(total_items / page_size)


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp a 1-based page into 1..total_pages (1 when there are no pages)."""
    return max(1, min(page, total_pages))


def paginate(tasks: Sequence[Task], page: int, page_size: int) -> Page:
    """Slice a 1-based page out of tasks.

    A page past the last one yields an empty slice rather than an error.

    Raises:
        ValueError: If page or page_size is less than 1
    """
    if page < 1:
        raise ValueError(f"Page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"Page size must be >= 1, got {page_size}")

    total = len(tasks)
    start = (page - 1) * page_size
    end = start + page_size
    return Page(
        items=tuple(tasks[start:end]),
        page=page,
        page_size=page_size,
        total_items=total,
        total_pages=total_pages_for(total, page_size),
        start_index=min(start, total),
        end_index=min(end, total),
    )


def derive_page(tasks: Iterable[Task], query: ViewQuery, page: int, page_size: int) -> Page:
    """Stages 1-5."""
    return paginate(derive(tasks, query), page, page_size)


# --- Grouping for board and calendar ---


def group_by_category(tasks: Iterable[Task]) -> dict[str, list[Task]]:
    """Board columns: every category in CATEGORIES order, then Uncategorized."""
    groups: dict[str, list[Task]] = {name: [] for name in CATEGORIES}
    groups[UNCATEGORIZED] = []
    for task in tasks:
        groups[task.category if task.category in CATEGORIES else UNCATEGORIZED].append(task)
    return groups


def group_by_due_date(tasks: Iterable[Task]) -> dict[date, list[Task]]:
    """Calendar cells: tasks per due date, undated tasks left out.

    Within a day, timed tasks come first by time, then the rest by order.
    """
    groups: dict[date, list[Task]] = {}
    for task in tasks:
        if task.due_date is None:
            continue
        groups.setdefault(task.due_date, []).append(task)
    for day_tasks in groups.values():
        day_tasks.sort(key=lambda t: (t.due_time is None, t.due_time or time.min, t.order))
    return dict(sorted(groups.items()))

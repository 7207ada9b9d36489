"""Todo collection state owner."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime, time
from enum import Enum

from todoboard import pipeline
from todoboard.models import (
    Priority,
    StatusFilter,
    Task,
    TaskDraft,
    TaskValidationError,
    ViewMode,
    parse_due_date,
    parse_due_time,
    parse_priority,
    validate_category,
    validate_text,
)
from todoboard.pipeline import SortKey, ViewQuery
from todoboard.reorder import reorder as move_and_renumber

logger = logging.getLogger("todoboard.store")

# Fields a caller may change through update()
UPDATABLE_FIELDS = frozenset(
    f.name for f in fields(Task) if f.name not in ("id", "order", "created_at")
)

# Typed fields: accepted as their type, None, or a string run through the parser
TYPED_FIELDS = {
    "priority": (Priority, parse_priority),
    "due_date": (date, parse_due_date),
    "due_time": (time, parse_due_time),
}


class ReorderScope(Enum):
    """Which sequence reorder indices address."""

    FULL = "full"  # canonical collection, by order
    FILTERED = "filtered"  # current derived view


@dataclass(frozen=True)
class StoreState:
    """One consistent snapshot of the store."""

    tasks: tuple[Task, ...] = ()
    editing_task_id: str | None = None
    adding: bool = False
    view: ViewMode = ViewMode.LIST
    query: ViewQuery = field(default_factory=ViewQuery)


def generate_task_id() -> str:
    """Generate an 8-char hex ID."""
    return uuid.uuid4().hex[:8]


class TodoStore:
    """Owns the canonical task collection.

    Every command builds a complete next StoreState and swaps it in with a
    single assignment, so callers never observe a partially applied command.
    Commands on a missing id, or with out-of-range indices, leave the state
    untouched and report it through their return value.
    """

    def __init__(
        self,
        tasks: Iterable[Task] = (),
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = generate_task_id,
    ):
        self._clock = clock
        self._id_factory = id_factory
        self._listeners: list[Callable[[StoreState], None]] = []
        self._state = StoreState(tasks=self._checked(tasks))

    # --- reads ---

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def tasks(self) -> list[Task]:
        """Canonical collection in order."""
        return pipeline.sort_tasks(self._state.tasks, SortKey.ORDER)

    def __len__(self) -> int:
        return len(self._state.tasks)

    def get(self, id: str) -> Task | None:
        for task in self._state.tasks:
            if task.id == id:
                return task
        return None

    def filtered(self) -> list[Task]:
        """Current derived view (filters and sort, no pagination)."""
        return pipeline.derive(self._state.tasks, self._state.query)

    def subscribe(self, listener: Callable[[StoreState], None]) -> Callable[[], None]:
        """Call listener with the new state after every change. Returns an unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- collection commands ---

    def add(self, draft: TaskDraft) -> Task:
        """Append a new task at the end of the canonical order."""
        task = Task(
            id=self._new_id(),
            text=draft.text,
            created_at=self._clock(),
            category=draft.category,
            priority=draft.priority,
            due_date=draft.due_date,
            due_time=draft.due_time,
            order=len(self._state.tasks),
        )
        self._commit(replace(self._state, tasks=self._state.tasks + (task,)))
        logger.debug("Added task %s", task.id)
        return task

    def update(self, id: str, **changes) -> Task | None:
        """Merge changes onto a task and leave editing mode.

        Raises:
            TypeError: If changes names a field that cannot be updated
            TaskValidationError: If a new value is invalid for its field
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise TypeError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        if "text" in changes:
            changes["text"] = validate_text(changes["text"])
        if "category" in changes:
            changes["category"] = validate_category(changes["category"])
        for name, (kind, parse) in TYPED_FIELDS.items():
            value = changes.get(name)
            if value is None or isinstance(value, kind):
                continue
            if not isinstance(value, str):
                raise TaskValidationError(f"{name} must be {kind.__name__}, got {value!r}")
            changes[name] = parse(value)
        if "completed" in changes and not isinstance(changes["completed"], bool):
            raise TaskValidationError(f"completed must be bool, got {changes['completed']!r}")

        current = self.get(id)
        if current is None:
            logger.debug("update: task %s not found", id)
            return None
        updated = replace(current, **changes)
        self._commit(
            replace(
                self._state,
                tasks=self._replaced(updated),
                editing_task_id=None,
            )
        )
        return updated

    def delete(self, id: str) -> bool:
        """Remove a task. Remaining order values are left as they are."""
        remaining = tuple(t for t in self._state.tasks if t.id != id)
        if len(remaining) == len(self._state.tasks):
            logger.debug("delete: task %s not found", id)
            return False
        editing = None if self._state.editing_task_id == id else self._state.editing_task_id
        self._commit(replace(self._state, tasks=remaining, editing_task_id=editing))
        logger.debug("Deleted task %s", id)
        return True

    def toggle(self, id: str) -> Task | None:
        current = self.get(id)
        if current is None:
            logger.debug("toggle: task %s not found", id)
            return None
        updated = replace(current, completed=not current.completed)
        self._commit(replace(self._state, tasks=self._replaced(updated)))
        return updated

    def duplicate(self, id: str) -> Task | None:
        """Copy a task to the end of the collection as a fresh, incomplete task."""
        source = self.get(id)
        if source is None:
            logger.debug("duplicate: task %s not found", id)
            return None
        copy = replace(
            source,
            id=self._new_id(),
            text=f"{source.text} (copy)",
            completed=False,
            order=len(self._state.tasks),
            created_at=self._clock(),
        )
        self._commit(replace(self._state, tasks=self._state.tasks + (copy,)))
        return copy

    def reorder(
        self,
        from_index: int,
        to_index: int,
        scope: ReorderScope = ReorderScope.FILTERED,
    ) -> bool:
        """Move one task within the addressed sequence and renumber it.

        With FILTERED scope only the visible tasks get new order values;
        tasks hidden by the current query keep theirs, which can leave the
        full collection with gaps or repeated values.
        """
        if scope == ReorderScope.FULL:
            sequence = self.tasks
        else:
            sequence = self.filtered()

        try:
            rearranged = move_and_renumber(sequence, from_index, to_index)
        except IndexError as e:
            logger.debug("reorder ignored: %s", e)
            return False

        by_id = {t.id: t for t in rearranged}
        tasks = tuple(by_id.get(t.id, t) for t in self._state.tasks)
        self._commit(replace(self._state, tasks=tasks))
        return True

    def import_tasks(self, tasks: Iterable[Task]) -> None:
        """Replace the whole collection. Callers build valid Task records.

        Raises:
            ValueError: If two tasks share an id
        """
        self._commit(
            replace(self._state, tasks=self._checked(tasks), editing_task_id=None)
        )
        logger.info("Imported %d tasks", len(self._state.tasks))

    # --- UI mode commands ---

    def set_editing_task(self, id: str | None) -> None:
        """Enter edit mode for one task. Leaves add mode."""
        self._commit(replace(self._state, editing_task_id=id, adding=False))

    def cancel_editing(self) -> None:
        self._commit(replace(self._state, editing_task_id=None))

    def set_adding(self, adding: bool) -> None:
        """Toggle add mode. Entering it leaves edit mode."""
        editing = None if adding else self._state.editing_task_id
        self._commit(replace(self._state, adding=adding, editing_task_id=editing))

    def set_view(self, view: ViewMode) -> None:
        self._commit(replace(self._state, view=view))

    # --- query commands ---

    def set_query(self, query: ViewQuery) -> None:
        self._commit(replace(self._state, query=query))

    def set_search(self, term: str) -> None:
        self.set_query(replace(self._state.query, search=term))

    def set_status_filter(self, statuses: Iterable[StatusFilter]) -> None:
        self.set_query(replace(self._state.query, statuses=frozenset(statuses)))

    def set_category_filter(self, categories: Iterable[str]) -> None:
        self.set_query(replace(self._state.query, categories=frozenset(categories)))

    def set_priority_filter(self, priorities: Iterable[Priority | None]) -> None:
        self.set_query(replace(self._state.query, priorities=frozenset(priorities)))

    def set_sort(self, key: SortKey, descending: bool = False) -> None:
        self.set_query(replace(self._state.query, sort_key=key, descending=descending))

    # --- internals ---

    def _commit(self, state: StoreState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _replaced(self, updated: Task) -> tuple[Task, ...]:
        return tuple(updated if t.id == updated.id else t for t in self._state.tasks)

    def _new_id(self) -> str:
        existing = {t.id for t in self._state.tasks}
        while True:
            new_id = self._id_factory()
            if new_id not in existing:
                return new_id

    @staticmethod
    def _checked(tasks: Iterable[Task]) -> tuple[Task, ...]:
        result = tuple(tasks)
        seen: set[str] = set()
        for task in result:
            if task.id in seen:
                raise ValueError(f"Duplicate task id: {task.id}")
            seen.add(task.id)
        return result

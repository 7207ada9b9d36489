"""Interactive session state wrapped around a TodoStore."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from todoboard.debounce import Debouncer, TimerFactory
from todoboard.models import CATEGORIES, UNCATEGORIZED, Priority, StatusFilter, Task
from todoboard.pipeline import Page, clamp_page, paginate, parse_sort_preset, total_pages_for
from todoboard.reorder import index_of
from todoboard.selection import StagedSelection
from todoboard.store import ReorderScope, TodoStore

if TYPE_CHECKING:
    from todoboard.config import Config

logger = logging.getLogger("todoboard.session")

CATEGORY_OPTIONS = (*CATEGORIES, UNCATEGORIZED)
PRIORITY_OPTIONS = (Priority.HIGH, Priority.MEDIUM, Priority.LOW, None)
STATUS_OPTIONS = (StatusFilter.COMPLETE, StatusFilter.INCOMPLETE)


class Session:
    """What one user sees: a store plus search, filter menus and paging.

    Filter menus start with every option applied. Any change to the query
    sends the list view back to page 1.
    """

    def __init__(
        self,
        store: TodoStore | None = None,
        page_size: int = 25,
        debounce_seconds: float = 0.3,
        timer_factory: TimerFactory | None = None,
    ):
        self.store = store or TodoStore()
        self.page_size = page_size
        self.page = 1
        self.search_input = ""

        kwargs = {"timer_factory": timer_factory} if timer_factory else {}
        self.search = Debouncer(debounce_seconds, self._apply_search, **kwargs)
        self.categories = StagedSelection(CATEGORY_OPTIONS)
        self.priorities = StagedSelection(PRIORITY_OPTIONS)
        self.statuses = StagedSelection(STATUS_OPTIONS)

    @classmethod
    def from_config(cls, config: Config, store: TodoStore | None = None) -> Session:
        session = cls(
            store=store,
            page_size=config.items_per_page,
            debounce_seconds=config.search_debounce,
        )
        session.sort(config.default_sort)
        return session

    # --- search ---

    def type_search(self, text: str) -> None:
        """Record search input; the store sees it after the debounce delay."""
        self.search_input = text
        self.search.call(text)

    def settle(self) -> None:
        """Apply any pending debounced search right away."""
        self.search.flush()

    def _apply_search(self, term: str) -> None:
        logger.debug("Applying search %r", term)
        self.store.set_search(term)
        self.page = 1

    # --- filter menus ---

    def commit_filters(self) -> None:
        """Commit every menu's draft and push the applied sets to the store."""
        store = self.store
        store.set_category_filter(self.categories.commit())
        store.set_priority_filter(self.priorities.commit())
        store.set_status_filter(self.statuses.commit())
        self.page = 1

    def sort(self, preset: str) -> None:
        key, descending = parse_sort_preset(preset)
        self.store.set_sort(key, descending)
        self.page = 1

    # --- paging ---

    @property
    def total_pages(self) -> int:
        return total_pages_for(len(self.store.filtered()), self.page_size)

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError(f"Page size must be >= 1, got {page_size}")
        self.page_size = page_size
        self.page = 1

    def go_to(self, page: int) -> int:
        """Move to a page, clamped to the valid range. Returns the new page."""
        self.page = clamp_page(page, self.total_pages)
        return self.page

    def current_page(self) -> Page:
        """The list view's visible slice, clamped after deletes shrink the view."""
        visible = self.store.filtered()
        self.page = clamp_page(self.page, total_pages_for(len(visible), self.page_size))
        return paginate(visible, self.page, self.page_size)

    # --- drag and drop ---

    def drop(self, active_id: str, over_id: str | None) -> bool:
        """Finish a drag of active_id onto over_id within the visible list.

        A drop outside any target (over_id None) or onto itself changes nothing.
        """
        if over_id is None or over_id == active_id:
            return False
        visible = self.store.filtered()
        from_index = index_of(visible, active_id)
        to_index = index_of(visible, over_id)
        if from_index is None or to_index is None:
            logger.debug("drop ignored: %s or %s not visible", active_id, over_id)
            return False
        return self.store.reorder(from_index, to_index, ReorderScope.FILTERED)

    def visible_tasks(self) -> list[Task]:
        return self.store.filtered()

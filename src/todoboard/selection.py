"""Draft vs. applied selection for multi-select filter menus."""

from __future__ import annotations

from collections.abc import Hashable, Iterable


class StagedSelection:
    """A multi-select whose changes only take effect on commit().

    While a menu is open the user edits `draft`; closing the menu without
    committing throws the draft away and `applied` stays as it was.
    """

    def __init__(self, options: Iterable[Hashable], applied: Iterable[Hashable] | None = None):
        self.options: tuple = tuple(options)
        self._applied = self._checked(self.options if applied is None else applied)
        self._draft = self._applied
        self.is_open = False

    @property
    def applied(self) -> frozenset:
        return self._applied

    @property
    def draft(self) -> frozenset:
        return self._draft

    @property
    def dirty(self) -> bool:
        return self._draft != self._applied

    def open(self) -> None:
        self._draft = self._applied
        self.is_open = True

    def close(self) -> None:
        """Close without applying."""
        self._draft = self._applied
        self.is_open = False

    def toggle(self, option: Hashable) -> None:
        self._checked([option])
        self._draft = self._draft ^ {option}

    def set(self, options: Iterable[Hashable]) -> None:
        self._draft = self._checked(options)

    def select_all(self) -> None:
        self._draft = frozenset(self.options)

    def clear(self) -> None:
        self._draft = frozenset()

    def commit(self) -> frozenset:
        """Apply the draft and close."""
        self._applied = self._draft
        self.is_open = False
        return self._applied

    def _checked(self, values: Iterable[Hashable]) -> frozenset:
        result = frozenset(values)
        unknown = result - set(self.options)
        if unknown:
            raise ValueError(f"Unknown option(s): {', '.join(sorted(map(str, unknown)))}")
        return result

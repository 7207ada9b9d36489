"""Tests for StagedSelection."""

import pytest

from todoboard.selection import StagedSelection


@pytest.fixture
def menu():
    return StagedSelection(["Work", "Home", "Travel"])


class TestStagedSelection:
    def test_starts_with_everything_applied(self, menu):
        assert menu.applied == {"Work", "Home", "Travel"}
        assert menu.draft == menu.applied

    def test_initial_applied(self):
        menu = StagedSelection(["a", "b"], applied=["a"])
        assert menu.applied == {"a"}

    def test_toggle_only_changes_draft(self, menu):
        menu.open()
        menu.toggle("Work")
        assert menu.draft == {"Home", "Travel"}
        assert menu.applied == {"Work", "Home", "Travel"}
        assert menu.dirty

    def test_commit_applies(self, menu):
        menu.open()
        menu.toggle("Home")
        assert menu.commit() == {"Work", "Travel"}
        assert menu.applied == {"Work", "Travel"}
        assert not menu.is_open

    def test_close_discards_draft(self, menu):
        menu.open()
        menu.clear()
        menu.close()
        assert menu.draft == menu.applied == {"Work", "Home", "Travel"}

    def test_open_resets_draft(self, menu):
        menu.toggle("Work")
        menu.open()
        assert not menu.dirty

    def test_select_all_and_clear(self, menu):
        menu.clear()
        assert menu.draft == frozenset()
        menu.select_all()
        assert menu.draft == {"Work", "Home", "Travel"}

    def test_unknown_option(self, menu):
        with pytest.raises(ValueError, match="Garden"):
            menu.toggle("Garden")
        with pytest.raises(ValueError):
            menu.set(["Work", "Garden"])

    def test_none_is_a_valid_option(self):
        menu = StagedSelection(["high", None])
        menu.toggle(None)
        assert menu.draft == {"high"}

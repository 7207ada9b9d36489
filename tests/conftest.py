"""Pytest fixtures for todoboard tests."""

from datetime import datetime, timedelta
from itertools import count

import pytest


@pytest.fixture(autouse=True)
def clear_caches(tmp_path, monkeypatch):
    """Clear module-level caches and isolate config before each test."""
    from todoboard.config import clear_config_cache

    monkeypatch.setenv("TODOBOARD_CONFIG_DIR", str(tmp_path / "config"))
    clear_config_cache()

    yield

    clear_config_cache()


@pytest.fixture
def id_factory():
    """Predictable ids: t0001, t0002, ..."""
    counter = count(1)
    return lambda: f"t{next(counter):04d}"


@pytest.fixture
def clock():
    """Clock advancing one minute per call from 2024-01-01 09:00."""
    ticks = count()
    start = datetime(2024, 1, 1, 9, 0)
    return lambda: start + timedelta(minutes=next(ticks))


@pytest.fixture
def store(id_factory, clock):
    from todoboard.store import TodoStore

    return TodoStore(clock=clock, id_factory=id_factory)


@pytest.fixture
def make_task():
    """Build Task records directly, bypassing the store."""
    from todoboard.models import Task

    def _make(id, text=None, order=0, **kwargs):
        kwargs.setdefault("created_at", datetime(2024, 1, 1, 9, 0))
        return Task(id=id, text=text or f"Task {id}", order=order, **kwargs)

    return _make

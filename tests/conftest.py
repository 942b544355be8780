from __future__ import annotations

import itertools
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import pytest

from blockpad.block_store import BlockStore
from blockpad.editor import BlockEditor
from blockpad.menus import MenuCoordinator

FIXED_NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


class ChangeRecorder:
    """Collects the snapshots a store or calendar publishes."""

    def __init__(self) -> None:
        self.snapshots: list[list[dict[str, Any]]] = []

    def __call__(self, snapshot: list[dict[str, Any]]) -> None:
        self.snapshots.append(snapshot)

    @property
    def count(self) -> int:
        return len(self.snapshots)

    @property
    def last(self) -> list[dict[str, Any]]:
        return self.snapshots[-1]


def sequential_ids(prefix: str) -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def changes() -> ChangeRecorder:
    return ChangeRecorder()


@pytest.fixture
def menus() -> MenuCoordinator:
    return MenuCoordinator()


@pytest.fixture
def make_store(menus: MenuCoordinator, changes: ChangeRecorder) -> Callable[..., BlockStore]:
    """Build a store with a fixed clock, predictable ids and a recorder."""

    def factory(seed: list[dict[str, Any]] | None = None, **kwargs: Any) -> BlockStore:
        kwargs.setdefault("menus", menus)
        kwargs.setdefault("on_change", changes)
        kwargs.setdefault("clock", lambda: FIXED_NOW)
        kwargs.setdefault("id_factory", sequential_ids("new"))
        return BlockStore(seed, **kwargs)

    return factory


@pytest.fixture
def make_editor(changes: ChangeRecorder) -> Callable[..., BlockEditor]:
    def factory(seed: list[dict[str, Any]] | None = None, **kwargs: Any) -> BlockEditor:
        kwargs.setdefault("on_change", changes)
        kwargs.setdefault("clock", lambda: FIXED_NOW)
        kwargs.setdefault("id_factory", sequential_ids("new"))
        return BlockEditor(seed, **kwargs)

    return factory


@pytest.fixture
def table_seed() -> list[dict[str, Any]]:
    return [
        {"id": "t1", "type": "table", "content": "", "tableData": {
            "headers": ["Column 1", "Column 2"],
            "rows": [["a", "b"], ["c", "d"]],
        }},
    ]


@pytest.fixture
def chart_seed() -> list[dict[str, Any]]:
    return [
        {"id": "c1", "type": "chart-bar", "content": "", "chartData": {
            "labels": ["A", "B", "C"],
            "values": [10, 20, 30],
        }},
    ]

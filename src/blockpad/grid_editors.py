"""Incremental editors for table and chart blocks.

Both editors work on a block's working copy through BlockStore.mutate,
so a call either leaves the block consistent or changes nothing.
Removals stop at one row, one column or one data point.
"""

from __future__ import annotations

from typing import Any, Callable

from .block_store import BlockStore
from .blocks_models import Block, ChartPayload, TablePayload, as_number
from .errors import Outcome, ValidationError


def _index_problem(name: str, index: Any, size: int) -> str | None:
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < size:
        return f"{name} {index!r} is outside 0..{size - 1}"
    return None


class TableEditor:
    """Row and column edits for table blocks."""

    def __init__(self, store: BlockStore) -> None:
        self._store = store

    def add_row(self, block_id: str) -> Outcome[int]:
        """Append a row of empty cells, one per header."""

        def edit(table: TablePayload) -> Outcome[int] | None:
            table.rows.append([""] * len(table.headers))
            return Outcome.applied(len(table.rows) - 1, block_id=block_id)

        return self._edit(block_id, edit)

    def add_column(self, block_id: str) -> Outcome[int]:
        """Append a header `Column {n}` and an empty cell to every row."""

        def edit(table: TablePayload) -> Outcome[int] | None:
            table.headers.append(f"Column {len(table.headers) + 1}")
            for row in table.rows:
                row.append("")
            return Outcome.applied(len(table.headers) - 1, block_id=block_id)

        return self._edit(block_id, edit)

    def remove_row(self, block_id: str, row: int) -> Outcome[None]:
        def edit(table: TablePayload) -> Outcome[None] | None:
            problem = _index_problem("row", row, len(table.rows))
            if problem:
                return Outcome.rejected(problem, block_id=block_id)
            if len(table.rows) <= 1:
                return Outcome.rejected("A table keeps at least one row", block_id=block_id)
            del table.rows[row]
            return None

        return self._edit(block_id, edit)

    def remove_column(self, block_id: str, column: int) -> Outcome[None]:
        def edit(table: TablePayload) -> Outcome[None] | None:
            problem = _index_problem("column", column, len(table.headers))
            if problem:
                return Outcome.rejected(problem, block_id=block_id)
            if len(table.headers) <= 1:
                return Outcome.rejected("A table keeps at least one column", block_id=block_id)
            del table.headers[column]
            for cells in table.rows:
                del cells[column]
            return None

        return self._edit(block_id, edit)

    def set_header(self, block_id: str, column: int, text: str) -> Outcome[None]:
        def edit(table: TablePayload) -> Outcome[None] | None:
            problem = _index_problem("column", column, len(table.headers))
            if problem:
                return Outcome.rejected(problem, block_id=block_id)
            if not isinstance(text, str):
                return Outcome.rejected("Header text must be a string", block_id=block_id)
            table.headers[column] = text
            return None

        return self._edit(block_id, edit)

    def set_cell(self, block_id: str, row: int, column: int, text: str) -> Outcome[None]:
        def edit(table: TablePayload) -> Outcome[None] | None:
            problem = _index_problem("row", row, len(table.rows)) or _index_problem(
                "column", column, len(table.headers)
            )
            if problem:
                return Outcome.rejected(problem, block_id=block_id)
            if not isinstance(text, str):
                return Outcome.rejected("Cell text must be a string", block_id=block_id)
            table.rows[row][column] = text
            return None

        return self._edit(block_id, edit)

    def _edit(
        self,
        block_id: str,
        edit: Callable[[TablePayload], Outcome[Any] | None],
    ) -> Outcome[Any]:
        def mutator(block: Block) -> Outcome[Any] | None:
            if not isinstance(block.payload, TablePayload):
                return Outcome.rejected(f"{block.type.value} is not a table", block_id=block_id)
            return edit(block.payload)

        return self._store.mutate(block_id, mutator)


class ChartEditor:
    """Label/value edits for bar and pie chart blocks."""

    def __init__(self, store: BlockStore) -> None:
        self._store = store

    def add_data_point(self, block_id: str) -> Outcome[int]:
        """Append the pair (`Item {n}`, 0)."""

        def edit(chart: ChartPayload) -> Outcome[int] | None:
            chart.labels.append(f"Item {len(chart.labels) + 1}")
            chart.values.append(0)
            return Outcome.applied(len(chart.labels) - 1, block_id=block_id)

        return self._edit(block_id, edit)

    def remove_data_point(self, block_id: str, index: int) -> Outcome[None]:
        def edit(chart: ChartPayload) -> Outcome[None] | None:
            problem = _index_problem("index", index, len(chart.labels))
            if problem:
                return Outcome.rejected(problem, block_id=block_id)
            if len(chart.labels) <= 1:
                return Outcome.rejected("A chart keeps at least one data point", block_id=block_id)
            del chart.labels[index]
            del chart.values[index]
            return None

        return self._edit(block_id, edit)

    def set_label(self, block_id: str, index: int, text: str) -> Outcome[None]:
        def edit(chart: ChartPayload) -> Outcome[None] | None:
            problem = _index_problem("index", index, len(chart.labels))
            if problem:
                return Outcome.rejected(problem, block_id=block_id)
            if not isinstance(text, str):
                return Outcome.rejected("Label must be a string", block_id=block_id)
            chart.labels[index] = text
            return None

        return self._edit(block_id, edit)

    def set_value(self, block_id: str, index: int, value: float) -> Outcome[None]:
        def edit(chart: ChartPayload) -> Outcome[None] | None:
            problem = _index_problem("index", index, len(chart.values))
            if problem:
                return Outcome.rejected(problem, block_id=block_id)
            try:
                chart.values[index] = as_number(value, "value")
            except ValidationError as exc:
                return Outcome.rejected(exc.message, block_id=block_id)
            return None

        return self._edit(block_id, edit)

    def _edit(
        self,
        block_id: str,
        edit: Callable[[ChartPayload], Outcome[Any] | None],
    ) -> Outcome[Any]:
        def mutator(block: Block) -> Outcome[Any] | None:
            if not isinstance(block.payload, ChartPayload):
                return Outcome.rejected(f"{block.type.value} is not a chart", block_id=block_id)
            return edit(block.payload)

        return self._store.mutate(block_id, mutator)

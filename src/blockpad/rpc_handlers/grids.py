"""Table and chart RPC handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ._base import outcome_result, rpc_handler

if TYPE_CHECKING:
    from blockpad.editor import BlockEditor


# =============================================================================
# Tables
# =============================================================================


@rpc_handler("table/add_row")
def handle_table_add_row(editor: BlockEditor, *, block_id: str) -> dict[str, Any]:
    outcome = editor.tables.add_row(block_id)
    return outcome_result(outcome, index=outcome.value)


@rpc_handler("table/add_column")
def handle_table_add_column(editor: BlockEditor, *, block_id: str) -> dict[str, Any]:
    outcome = editor.tables.add_column(block_id)
    return outcome_result(outcome, index=outcome.value)


@rpc_handler("table/remove_row")
def handle_table_remove_row(editor: BlockEditor, *, block_id: str, row: int) -> dict[str, Any]:
    return outcome_result(editor.tables.remove_row(block_id, row))


@rpc_handler("table/remove_column")
def handle_table_remove_column(editor: BlockEditor, *, block_id: str, column: int) -> dict[str, Any]:
    return outcome_result(editor.tables.remove_column(block_id, column))


@rpc_handler("table/set_header")
def handle_table_set_header(
    editor: BlockEditor,
    *,
    block_id: str,
    column: int,
    text: str,
) -> dict[str, Any]:
    return outcome_result(editor.tables.set_header(block_id, column, text))


@rpc_handler("table/set_cell")
def handle_table_set_cell(
    editor: BlockEditor,
    *,
    block_id: str,
    row: int,
    column: int,
    text: str,
) -> dict[str, Any]:
    return outcome_result(editor.tables.set_cell(block_id, row, column, text))


# =============================================================================
# Charts
# =============================================================================


@rpc_handler("chart/add_point")
def handle_chart_add_point(editor: BlockEditor, *, block_id: str) -> dict[str, Any]:
    outcome = editor.charts.add_data_point(block_id)
    return outcome_result(outcome, index=outcome.value)


@rpc_handler("chart/remove_point")
def handle_chart_remove_point(editor: BlockEditor, *, block_id: str, index: int) -> dict[str, Any]:
    return outcome_result(editor.charts.remove_data_point(block_id, index))


@rpc_handler("chart/set_label")
def handle_chart_set_label(
    editor: BlockEditor,
    *,
    block_id: str,
    index: int,
    text: str,
) -> dict[str, Any]:
    return outcome_result(editor.charts.set_label(block_id, index, text))


@rpc_handler("chart/set_value")
def handle_chart_set_value(
    editor: BlockEditor,
    *,
    block_id: str,
    index: int,
    value: float,
) -> dict[str, Any]:
    return outcome_result(editor.charts.set_value(block_id, index, value))

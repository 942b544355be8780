"""Blocks RPC handlers - structural edits, drag reorder and the read model."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from blockpad.blocks_models import BLOCK_TYPE_CATALOG, COLOR_PALETTE

from ._base import outcome_result, require_object, rpc_handler

if TYPE_CHECKING:
    from blockpad.editor import BlockEditor

logger = logging.getLogger(__name__)


# =============================================================================
# Read model
# =============================================================================


@rpc_handler("editor/state")
def handle_editor_state(editor: BlockEditor) -> dict[str, Any]:
    """Blocks, the open overlay and any pending focus request."""
    return editor.read_model()


@rpc_handler("document/get")
def handle_document_get(editor: BlockEditor) -> dict[str, Any]:
    return editor.to_document()


@rpc_handler("editor/catalog")
def handle_editor_catalog(_editor: BlockEditor) -> dict[str, Any]:
    """Block types and colours offered by the menus."""
    return {
        "blockTypes": [
            {"type": info.type.value, "label": info.label, "description": info.description}
            for info in BLOCK_TYPE_CATALOG
        ],
        "colors": [color._asdict() for color in COLOR_PALETTE],
    }


# =============================================================================
# Block commands
# =============================================================================


@rpc_handler("blocks/add")
def handle_blocks_add(
    editor: BlockEditor,
    *,
    type: str,
    after_id: str | None = None,
) -> dict[str, Any]:
    outcome = editor.store.add_block(type, after_id)
    return outcome_result(outcome)


@rpc_handler("blocks/update")
def handle_blocks_update(
    editor: BlockEditor,
    *,
    block_id: str,
    fields: dict[str, Any],
) -> dict[str, Any]:
    outcome = editor.store.update_block(block_id, require_object(fields, "fields"))
    return outcome_result(outcome)


@rpc_handler("blocks/change_type")
def handle_blocks_change_type(editor: BlockEditor, *, block_id: str, type: str) -> dict[str, Any]:
    return outcome_result(editor.store.change_type(block_id, type))


@rpc_handler("blocks/delete")
def handle_blocks_delete(editor: BlockEditor, *, block_id: str) -> dict[str, Any]:
    return outcome_result(editor.store.delete_block(block_id))


@rpc_handler("blocks/move")
def handle_blocks_move(editor: BlockEditor, *, from_index: int, to_index: int) -> dict[str, Any]:
    return outcome_result(editor.store.move_block(from_index, to_index))


@rpc_handler("blocks/toggle_checked")
def handle_blocks_toggle_checked(editor: BlockEditor, *, block_id: str) -> dict[str, Any]:
    return outcome_result(editor.store.toggle_checked(block_id))


@rpc_handler("blocks/toggle_collapsed")
def handle_blocks_toggle_collapsed(editor: BlockEditor, *, block_id: str) -> dict[str, Any]:
    return outcome_result(editor.store.toggle_collapsed(block_id))


@rpc_handler("blocks/set_alignment")
def handle_blocks_set_alignment(editor: BlockEditor, *, block_id: str, alignment: str) -> dict[str, Any]:
    return outcome_result(editor.store.set_alignment(block_id, alignment))


@rpc_handler("blocks/set_color")
def handle_blocks_set_color(
    editor: BlockEditor,
    *,
    block_id: str,
    value: str | None,
    target: str = "text",
) -> dict[str, Any]:
    return outcome_result(editor.store.set_color(block_id, value, target))


@rpc_handler("blocks/focus/take")
def handle_blocks_focus_take(editor: BlockEditor) -> dict[str, Any]:
    """Called by the surface after it paints; returns the block to focus."""
    request = editor.store.take_focus_request()
    return {"blockId": request.block_id if request else None}


# =============================================================================
# Drag reorder
# =============================================================================


@rpc_handler("drag/start")
def handle_drag_start(editor: BlockEditor, *, index: int) -> dict[str, Any]:
    return outcome_result(editor.drag.start(index))


@rpc_handler("drag/enter")
def handle_drag_enter(editor: BlockEditor, *, index: int) -> dict[str, Any]:
    editor.drag.enter(index)
    return {"source": editor.drag.source, "target": editor.drag.target}


@rpc_handler("drag/end")
def handle_drag_end(editor: BlockEditor) -> dict[str, Any]:
    return outcome_result(editor.drag.end())

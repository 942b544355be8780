"""Overlay RPC handlers - menus, slash commands, formatting and media modals.

The host performs text edits and file reads itself. Over RPC it sends
the results (serialized content, a URL, base64 file data), which are
fed to the controllers through small adapters.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
from typing import TYPE_CHECKING, Any

from blockpad.menus import OverlayKind, PaletteTarget, Point
from blockpad.selection_format import SelectionRect
from blockpad.rpc.types import INVALID_PARAMS, RpcError

from ._base import outcome_result, require_object, rpc_handler

if TYPE_CHECKING:
    from blockpad.editor import BlockEditor


def _number(data: dict[str, Any], key: str, name: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RpcError(INVALID_PARAMS, f"{name}.{key} must be a number")
    return float(value)


def _point(value: Any) -> Point | None:
    if value is None:
        return None
    data = require_object(value, "anchor")
    return Point(x=_number(data, "x", "anchor"), y=_number(data, "y", "anchor"))


def _overlay_result(editor: BlockEditor) -> dict[str, Any]:
    overlay = editor.menus.current
    return {"overlay": overlay.to_dict() if overlay else None}


def _decode(data_base64: str) -> bytes:
    try:
        return base64.b64decode(data_base64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise RpcError(INVALID_PARAMS, "data_base64 is not valid base64") from exc


class _ResolvedSurface:
    """Stands in for the host surface once it has already applied an edit."""

    def __init__(self, content: str) -> None:
        self._content = content
        self.commands: list[tuple[str, str | None]] = []

    def exec_command(self, command: str, value: str | None = None) -> None:
        self.commands.append((command, value))

    def serialize(self, block_id: str) -> str | None:
        return self._content


# =============================================================================
# Menus
# =============================================================================


@rpc_handler("menus/open")
def handle_menus_open(
    editor: BlockEditor,
    *,
    kind: str,
    block_id: str | None = None,
    anchor: dict[str, Any] | None = None,
    palette: str | None = None,
) -> dict[str, Any]:
    editor.menus.open(
        OverlayKind(kind),
        block_id,
        anchor=_point(anchor),
        palette=PaletteTarget(palette) if palette else None,
    )
    return _overlay_result(editor)


@rpc_handler("menus/toggle")
def handle_menus_toggle(editor: BlockEditor, *, kind: str, block_id: str | None = None) -> dict[str, Any]:
    editor.menus.toggle(OverlayKind(kind), block_id)
    return _overlay_result(editor)


@rpc_handler("menus/close")
def handle_menus_close(editor: BlockEditor, *, kind: str | None = None) -> dict[str, Any]:
    editor.menus.close(OverlayKind(kind) if kind else None)
    return _overlay_result(editor)


@rpc_handler("menus/pointer_down_outside")
def handle_menus_pointer_down_outside(editor: BlockEditor) -> dict[str, Any]:
    editor.menus.pointer_down_outside()
    return _overlay_result(editor)


# =============================================================================
# Slash commands
# =============================================================================


@rpc_handler("slash/key")
def handle_slash_key(
    editor: BlockEditor,
    *,
    block_id: str,
    key: str,
    shift: bool = False,
    anchor: dict[str, Any] | None = None,
) -> dict[str, Any]:
    handled = editor.slash.handle_key(block_id, key, shift=shift, anchor=_point(anchor))
    return {"preventDefault": handled, "state": editor.slash.state.value}


@rpc_handler("slash/open")
def handle_slash_open(editor: BlockEditor, *, anchor: dict[str, Any]) -> dict[str, Any]:
    opened = editor.slash.open_at(_point(require_object(anchor, "anchor")))
    return {"opened": opened, "state": editor.slash.state.value}


@rpc_handler("slash/select")
def handle_slash_select(editor: BlockEditor, *, type: str) -> dict[str, Any]:
    return outcome_result(editor.slash.select(type))


# =============================================================================
# Selection formatting
# =============================================================================


@rpc_handler("format/selection")
def handle_format_selection(
    editor: BlockEditor,
    *,
    block_id: str,
    rect: dict[str, Any] | None = None,
    collapsed: bool = False,
) -> dict[str, Any]:
    selection = None
    if rect is not None:
        data = require_object(rect, "rect")
        selection = SelectionRect(
            left=_number(data, "left", "rect"),
            top=_number(data, "top", "rect"),
            width=_number(data, "width", "rect"),
            height=_number({"height": 0, **data}, "height", "rect"),
        )
    editor.formatting.on_selection(block_id, selection, collapsed=collapsed)
    return _overlay_result(editor)


@rpc_handler("format/apply")
def handle_format_apply(
    editor: BlockEditor,
    *,
    command: str,
    content: str,
    url: str | None = None,
) -> dict[str, Any]:
    """Store the content the host produced after running command."""
    surface = _ResolvedSurface(content)
    outcome = editor.formatting.apply(command, surface, prompt_url=lambda: url)
    return outcome_result(outcome)


# =============================================================================
# Media modals
# =============================================================================


@rpc_handler("media/image/open")
def handle_media_image_open(editor: BlockEditor, *, block_id: str) -> dict[str, Any]:
    return outcome_result(editor.media.open_image_modal(block_id))


@rpc_handler("media/image/embed")
def handle_media_image_embed(editor: BlockEditor, *, url: str) -> dict[str, Any]:
    return outcome_result(editor.media.embed_url(url))


@rpc_handler("media/image/library")
def handle_media_image_library(editor: BlockEditor, *, url: str) -> dict[str, Any]:
    return outcome_result(editor.media.select_from_library(url))


@rpc_handler("media/image/upload")
def handle_media_image_upload(
    editor: BlockEditor,
    *,
    data_base64: str,
    mime_type: str = "image/png",
) -> dict[str, Any]:
    data = _decode(data_base64)

    async def read() -> bytes:
        return data

    return outcome_result(asyncio.run(editor.media.upload_image(read, mime_type)))


@rpc_handler("media/file/open")
def handle_media_file_open(editor: BlockEditor, *, block_id: str) -> dict[str, Any]:
    return outcome_result(editor.media.open_file_modal(block_id))


@rpc_handler("media/file/attach")
def handle_media_file_attach(
    editor: BlockEditor,
    *,
    name: str,
    size_bytes: int,
    mime_type: str,
    url: str,
) -> dict[str, Any]:
    outcome = editor.media.attach_file(name=name, size_bytes=size_bytes, mime_type=mime_type, url=url)
    return outcome_result(outcome)


@rpc_handler("media/file/upload")
def handle_media_file_upload(
    editor: BlockEditor,
    *,
    data_base64: str,
    name: str,
    mime_type: str,
) -> dict[str, Any]:
    data = _decode(data_base64)

    async def read() -> bytes:
        return data

    return outcome_result(asyncio.run(editor.media.upload_file(read, name=name, mime_type=mime_type)))


@rpc_handler("media/dismiss")
def handle_media_dismiss(editor: BlockEditor) -> dict[str, Any]:
    return {"closed": editor.media.dismiss()}

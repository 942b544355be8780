"""The editor: one document with its overlays, controllers and editors.

BlockEditor wires the pieces that share one document together and
exposes the read model the rendering surface paints from.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from .block_store import BlockStore, ChangeListener
from .calendar_bridge import CalendarBridge
from .errors import Outcome, ValidationError
from .grid_editors import ChartEditor, TableEditor
from .media import MediaAttachments
from .menus import MenuCoordinator, Overlay, OverlayKind, PaletteTarget
from .selection_format import SelectionFormatController
from .slash_commands import SlashCommandController

logger = logging.getLogger(__name__)


class DragSession:
    """Two-phase drag reorder.

    drag_start records the dragged index, drag_enter the index under the
    pointer; drag_end turns the pair into a single move_block call.
    """

    def __init__(self, store: BlockStore) -> None:
        self._store = store
        self._source: int | None = None
        self._target: int | None = None

    @property
    def source(self) -> int | None:
        return self._source

    @property
    def target(self) -> int | None:
        return self._target

    def start(self, index: int) -> Outcome[None]:
        blocks = self._store.blocks
        if not 0 <= index < len(blocks):
            return Outcome.rejected(f"No block at index {index}")
        block = blocks[index]
        if not block.is_draggable:
            return Outcome.rejected(f"{block.type.value} blocks cannot be dragged", block_id=block.id)
        self._source = index
        self._target = None
        return Outcome.applied(block_id=block.id)

    def enter(self, index: int) -> None:
        if self._source is not None:
            self._target = index

    def end(self) -> Outcome[None]:
        source, target = self._source, self._target
        self.cancel()
        if source is None or target is None:
            return Outcome.rejected("Drag ended without a source and a target")
        return self._store.move_block(source, target)

    def cancel(self) -> None:
        self._source = None
        self._target = None


class BlockEditor:
    """Composes the store, overlays, calendar and input controllers."""

    def __init__(
        self,
        seed: list[dict[str, Any]] | None = None,
        *,
        events: list[dict[str, Any]] | None = None,
        on_change: ChangeListener | None = None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
        welcome_text: str | None = None,
    ) -> None:
        self.menus = MenuCoordinator()
        self.store = BlockStore(
            seed,
            menus=self.menus,
            on_change=on_change,
            clock=clock,
            id_factory=id_factory,
            welcome_text=welcome_text,
        )
        self.calendar = CalendarBridge(self.store, events=events)
        self.tables = TableEditor(self.store)
        self.charts = ChartEditor(self.store)
        self.slash = SlashCommandController(self.store, self.menus)
        self.formatting = SelectionFormatController(self.store, self.menus)
        self.media = MediaAttachments(self.store, self.menus)
        self.drag = DragSession(self.store)

    @classmethod
    def from_file(cls, path: Path, **kwargs: Any) -> BlockEditor:
        """Load a document from JSON.

        The file holds either a list of blocks or an object with
        `blocks` and, optionally, the shared calendar `events`.

        Raises:
            ValidationError: If the file is not valid JSON or has the wrong shape.
        """
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Invalid JSON in {path}: {exc.msg}", field="seed") from exc

        if isinstance(data, list):
            return cls(data, **kwargs)
        if isinstance(data, dict) and isinstance(data.get("blocks"), list):
            return cls(data["blocks"], events=data.get("events") or [], **kwargs)
        raise ValidationError("Document must be a list of blocks or {blocks, events}", field="seed")

    def to_document(self) -> dict[str, Any]:
        return {"blocks": self.store.snapshot(), "events": self.calendar.snapshot()}

    def read_model(self) -> dict[str, Any]:
        """What the rendering surface paints: blocks, the open overlay, focus."""
        overlay = self.menus.current
        focus = self.store.pending_focus
        return {
            "blocks": self.store.snapshot(),
            "overlay": overlay.to_dict() if overlay else None,
            "pendingFocus": focus.block_id if focus else None,
        }

    # -------------------------------------------------------------------------
    # Menu buttons on a block
    # -------------------------------------------------------------------------

    def toggle_block_menu(self, block_id: str) -> Overlay | None:
        return self.menus.toggle(OverlayKind.BLOCK_MENU, block_id)

    def toggle_type_menu(self, block_id: str) -> Overlay | None:
        return self.menus.toggle(OverlayKind.TYPE_MENU, block_id)

    def open_color_palette(self, block_id: str, target: PaletteTarget | str) -> Overlay:
        return self.menus.open(OverlayKind.COLOR_PALETTE, block_id, palette=PaletteTarget(target))

"""Exclusive overlay coordination.

At most one overlay (block menu, type menu, slash menu, format menu,
colour palette, image modal, file modal) is open at a time. The open
overlay is held as a single `Overlay | None` value, so opening one
replaces whatever was open before.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class OverlayKind(str, Enum):
    BLOCK_MENU = "blockMenu"
    TYPE_MENU = "typeMenu"
    SLASH_MENU = "slashMenu"
    FORMAT_MENU = "formatMenu"
    COLOR_PALETTE = "colorPalette"
    IMAGE_MODAL = "imageModal"
    FILE_MODAL = "fileModal"


class PaletteTarget(str, Enum):
    TEXT = "text"
    BACKGROUND = "background"


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Overlay:
    """The currently open overlay, optionally scoped to a block."""

    kind: OverlayKind
    block_id: str | None = None
    anchor: Point | None = None
    palette: PaletteTarget | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"kind": self.kind.value, "blockId": self.block_id}
        if self.anchor is not None:
            result["anchor"] = self.anchor.to_dict()
        if self.palette is not None:
            result["palette"] = self.palette.value
        return result


OverlayListener = Callable[["Overlay | None"], None]
OutsideClickListener = Callable[[], None]


class MenuCoordinator:
    """Owns which overlay is open and tells listeners when that changes."""

    def __init__(self) -> None:
        self._current: Overlay | None = None
        self._listeners: list[OverlayListener] = []
        self._outside_listeners: list[OutsideClickListener] = []

    @property
    def current(self) -> Overlay | None:
        return self._current

    def subscribe(self, listener: OverlayListener) -> None:
        self._listeners.append(listener)

    def subscribe_outside_click(self, listener: OutsideClickListener) -> None:
        """Hear every outside pointer-down, even when no overlay is open."""
        self._outside_listeners.append(listener)

    def is_open(self, kind: OverlayKind, block_id: str | None = None) -> bool:
        """Check whether kind is open, optionally for a specific block."""
        if self._current is None or self._current.kind is not kind:
            return False
        return block_id is None or self._current.block_id == block_id

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def open(
        self,
        kind: OverlayKind,
        block_id: str | None = None,
        *,
        anchor: Point | None = None,
        palette: PaletteTarget | None = None,
    ) -> Overlay:
        """Open an overlay, closing any other."""
        if kind is OverlayKind.COLOR_PALETTE and palette is None:
            palette = PaletteTarget.TEXT
        if kind is not OverlayKind.COLOR_PALETTE:
            palette = None
        overlay = Overlay(kind=kind, block_id=block_id, anchor=anchor, palette=palette)
        self._set(overlay)
        return overlay

    def toggle(self, kind: OverlayKind, block_id: str | None = None) -> Overlay | None:
        """Open kind for block_id, or close it if it is already open there."""
        current = self._current
        if current is not None and current.kind is kind and current.block_id == block_id:
            self._set(None)
            return None
        return self.open(kind, block_id)

    def close(self, kind: OverlayKind | None = None) -> bool:
        """Close the open overlay; with kind, only if it is that kind.

        Returns:
            True if an overlay was closed.
        """
        if self._current is None:
            return False
        if kind is not None and self._current.kind is not kind:
            return False
        self._set(None)
        return True

    def close_for_block(self, block_id: str, kind: OverlayKind | None = None) -> bool:
        """Close the open overlay if it is scoped to block_id."""
        if self._current is None or self._current.block_id != block_id:
            return False
        return self.close(kind)

    def pointer_down_outside(self) -> bool:
        """Host reports a pointer-down outside every tracked overlay."""
        closed = self.close()
        for listener in list(self._outside_listeners):
            listener()
        return closed

    def escape(self) -> bool:
        """Escape closes the slash menu only."""
        return self.close(OverlayKind.SLASH_MENU)

    def _set(self, overlay: Overlay | None) -> None:
        if overlay == self._current:
            return
        previous = self._current
        self._current = overlay
        logger.debug(
            "Overlay %s -> %s",
            previous.kind.value if previous else None,
            overlay.kind.value if overlay else None,
        )
        for listener in list(self._listeners):
            listener(overlay)

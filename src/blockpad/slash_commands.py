"""Keystroke-driven block insertion.

    Idle --'/' on an empty block--> Listening --anchor--> Open(anchor)
    Open --select(type)--> Idle   (inserts a block after the trigger block)
    Listening / Open --Escape / outside click--> Idle   (no mutation)

Only one slash session exists at a time. Enter on a blank block also
inserts a paragraph after it.
"""

from __future__ import annotations

import logging
from enum import Enum

from .block_store import BlockStore
from .blocks_models import BlockType
from .errors import Outcome
from .menus import MenuCoordinator, Overlay, OverlayKind, Point

logger = logging.getLogger(__name__)

SLASH_KEY = "/"
ESCAPE_KEY = "Escape"
ENTER_KEY = "Enter"


class SlashState(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    OPEN = "open"


class SlashCommandController:
    def __init__(self, store: BlockStore, menus: MenuCoordinator) -> None:
        self._store = store
        self._menus = menus
        self._state = SlashState.IDLE
        self._block_id: str | None = None
        self._anchor: Point | None = None
        menus.subscribe(self._on_overlay_change)
        menus.subscribe_outside_click(self.cancel)

    @property
    def state(self) -> SlashState:
        return self._state

    @property
    def block_id(self) -> str | None:
        return self._block_id

    @property
    def anchor(self) -> Point | None:
        return self._anchor

    def handle_key(
        self,
        block_id: str,
        key: str,
        *,
        shift: bool = False,
        anchor: Point | None = None,
    ) -> bool:
        """Handle a keystroke in block_id.

        Returns:
            True if the host should suppress the key's default action.
        """
        block = self._store.get(block_id)
        if block is None:
            return False

        if key == SLASH_KEY:
            if block.content not in ("", SLASH_KEY):
                return False
            self._listen(block_id)
            if anchor is not None:
                self.open_at(anchor)
            return True

        if key == ESCAPE_KEY:
            self.cancel()
            return False

        if key == ENTER_KEY and not shift and block.content.strip() == "":
            self._store.add_block(BlockType.PARAGRAPH, block_id)
            return True

        return False

    def open_at(self, anchor: Point) -> bool:
        """Capture the overlay anchor and show the slash menu."""
        if self._state is not SlashState.LISTENING or self._block_id is None:
            return False
        self._state = SlashState.OPEN
        self._anchor = anchor
        self._menus.open(OverlayKind.SLASH_MENU, self._block_id, anchor=anchor)
        return True

    def select(self, block_type: BlockType | str) -> Outcome[str]:
        """Insert a block of block_type after the trigger block."""
        if self._state is not SlashState.OPEN or self._block_id is None:
            return Outcome.rejected("No slash menu is open")
        block_id = self._block_id
        self._reset()
        logger.debug("Slash command inserts %s after %s", block_type, block_id)
        return self._store.add_block(block_type, block_id)

    def cancel(self) -> None:
        """Leave the session without changing the document."""
        if self._state is SlashState.IDLE:
            return
        self._reset()
        self._menus.close(OverlayKind.SLASH_MENU)

    def _listen(self, block_id: str) -> None:
        if self._state is not SlashState.IDLE:
            self.cancel()
        self._state = SlashState.LISTENING
        self._block_id = block_id
        self._anchor = None

    def _reset(self) -> None:
        self._state = SlashState.IDLE
        self._block_id = None
        self._anchor = None

    def _on_overlay_change(self, overlay: Overlay | None) -> None:
        if self._state is SlashState.IDLE:
            return
        if self._state is SlashState.LISTENING:
            # Another overlay took over before the anchor arrived.
            if overlay is not None:
                self._reset()
            return
        if overlay is None or overlay.kind is not OverlayKind.SLASH_MENU or overlay.block_id != self._block_id:
            self._reset()

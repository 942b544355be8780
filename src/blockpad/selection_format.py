"""Selection-driven inline formatting.

The host text-edit surface performs the actual markup change; this
controller decides when the format overlay shows, routes the chosen
command to the surface, and writes the serialized result back to the
block.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from .block_store import BlockStore
from .errors import Outcome
from .menus import MenuCoordinator, OverlayKind, Point

logger = logging.getLogger(__name__)

# The overlay sits this far above the selection.
FORMAT_MENU_OFFSET = 10


class FormatCommand(str, Enum):
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKETHROUGH = "strikethrough"
    CODE = "code"
    LINK = "link"

    @property
    def host_command(self) -> str:
        """Name of the edit command on the host surface."""
        if self is FormatCommand.LINK:
            return "createLink"
        return self.value


@dataclass(frozen=True)
class SelectionRect:
    left: float
    top: float
    width: float
    height: float


class TextEditSurface(Protocol):
    """The host's editable text surface."""

    def exec_command(self, command: str, value: str | None = None) -> None: ...

    def serialize(self, block_id: str) -> str | None: ...


UrlPrompt = Callable[[], "str | None"]


class SelectionFormatController:
    def __init__(self, store: BlockStore, menus: MenuCoordinator) -> None:
        self._store = store
        self._menus = menus
        self._block_id: str | None = None

    @property
    def block_id(self) -> str | None:
        """Block that owns the most recent non-empty selection."""
        return self._block_id

    def on_selection(
        self,
        block_id: str,
        rect: SelectionRect | None,
        *,
        collapsed: bool = False,
    ) -> bool:
        """Show or hide the format overlay for a selection change.

        Returns:
            True if the overlay is now open for this selection.
        """
        if collapsed or rect is None or rect.width <= 0:
            self._menus.close(OverlayKind.FORMAT_MENU)
            return False

        self._block_id = block_id
        anchor = Point(x=rect.left + rect.width / 2, y=rect.top - FORMAT_MENU_OFFSET)
        self._menus.open(OverlayKind.FORMAT_MENU, block_id, anchor=anchor)
        return True

    def apply(
        self,
        command: FormatCommand | str,
        surface: TextEditSurface,
        *,
        prompt_url: UrlPrompt | None = None,
    ) -> Outcome[None]:
        """Apply command to the current selection and store the result.

        A link without a URL is abandoned before the surface is touched.
        Nothing is applied once the format overlay has closed.
        """
        command = FormatCommand(command)
        block_id = self._block_id
        if block_id is None:
            return Outcome.rejected("No selection to format")
        if self._store.get(block_id) is None:
            self._menus.close(OverlayKind.FORMAT_MENU)
            return Outcome.not_found(block_id)
        if not self._menus.is_open(OverlayKind.FORMAT_MENU, block_id):
            logger.debug("Format %s on %s ignored: overlay closed", command.value, block_id)
            return Outcome.rejected("The format menu is not open", block_id=block_id)

        value: str | None = None
        if command is FormatCommand.LINK:
            url = prompt_url() if prompt_url is not None else None
            if not url or not url.strip():
                self._menus.close(OverlayKind.FORMAT_MENU)
                logger.debug("Link on %s abandoned: no URL", block_id)
                return Outcome.rejected("A link needs a URL", block_id=block_id)
            value = url.strip()

        surface.exec_command(command.host_command, value)
        content = surface.serialize(block_id)
        self._menus.close(OverlayKind.FORMAT_MENU)
        if content is None:
            return Outcome.rejected("The edit surface returned no content", block_id=block_id)
        return self._store.update_block(block_id, {"content": content})

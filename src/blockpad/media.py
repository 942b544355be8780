"""Image and file attachment through the image and file modals.

Upload transport is external: the host hands over either a final URL or
an awaitable that resolves to the file's bytes. Bytes are stored in the
block as a base64 data URL.

A read can resolve after the user has closed the modal or opened it for
another block. The write is then dropped, so late uploads never land in
the wrong block.
"""

from __future__ import annotations

import base64
import logging
from typing import Awaitable, Callable

from .block_store import BlockStore
from .blocks_models import MEDIA_TYPES, BlockType
from .errors import Outcome
from .menus import MenuCoordinator, OverlayKind

logger = logging.getLogger(__name__)

MEDIA_LIBRARY: tuple[str, ...] = (
    "https://images.unsplash.com/photo-1618005182384-a83a8bd57fbe?w=800&q=80",
    "https://images.unsplash.com/photo-1620121692029-d088224ddc74?w=800&q=80",
    "https://images.unsplash.com/photo-1558591710-4b4a1ae0f04d?w=800&q=80",
)

FileRead = Callable[[], Awaitable[bytes]]


def to_data_url(data: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def format_file_size(size_bytes: int) -> str:
    """Human-readable size, e.g. `512 B`, `1.5 KB`, `2.0 MB`."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    size = float(size_bytes)
    for unit in ("KB", "MB", "GB"):
        size /= 1024
        if size < 1024 or unit == "GB":
            return f"{size:.1f} {unit}"
    return f"{size:.1f} GB"


class MediaAttachments:
    def __init__(self, store: BlockStore, menus: MenuCoordinator) -> None:
        self._store = store
        self._menus = menus

    # -------------------------------------------------------------------------
    # Modals
    # -------------------------------------------------------------------------

    def open_image_modal(self, block_id: str) -> Outcome[None]:
        block = self._store.get(block_id)
        if block is None:
            return Outcome.not_found(block_id)
        if block.type is not BlockType.IMAGE:
            return Outcome.rejected(f"{block.type.value} is not an image block", block_id=block_id)
        self._menus.open(OverlayKind.IMAGE_MODAL, block_id)
        return Outcome.applied(block_id=block_id)

    def open_file_modal(self, block_id: str) -> Outcome[None]:
        block = self._store.get(block_id)
        if block is None:
            return Outcome.not_found(block_id)
        if block.type not in MEDIA_TYPES:
            return Outcome.rejected(f"{block.type.value} does not hold a file", block_id=block_id)
        self._menus.open(OverlayKind.FILE_MODAL, block_id)
        return Outcome.applied(block_id=block_id)

    def dismiss(self) -> bool:
        """Close whichever attachment modal is open."""
        return self._menus.close(OverlayKind.IMAGE_MODAL) or self._menus.close(
            OverlayKind.FILE_MODAL
        )

    # -------------------------------------------------------------------------
    # Images
    # -------------------------------------------------------------------------

    def embed_url(self, url: str) -> Outcome[None]:
        """Use an external image URL for the block the modal is open for."""
        block_id = self._modal_block(OverlayKind.IMAGE_MODAL)
        if block_id is None:
            return Outcome.rejected("The image modal is not open")
        if not url or not url.strip():
            return Outcome.rejected("An image URL is required", block_id=block_id)
        return self._write_image(block_id, url.strip())

    def select_from_library(self, url: str) -> Outcome[None]:
        block_id = self._modal_block(OverlayKind.IMAGE_MODAL)
        if block_id is None:
            return Outcome.rejected("The image modal is not open")
        if url not in MEDIA_LIBRARY:
            return Outcome.rejected("Not a media library image", block_id=block_id)
        return self._write_image(block_id, url)

    async def upload_image(self, read: FileRead, mime_type: str = "image/png") -> Outcome[None]:
        """Read an uploaded image and store it as a data URL."""
        block_id = self._modal_block(OverlayKind.IMAGE_MODAL)
        if block_id is None:
            return Outcome.rejected("The image modal is not open")

        data = await read()
        if not self._menus.is_open(OverlayKind.IMAGE_MODAL, block_id):
            logger.debug("Dropping image upload for %s: modal dismissed", block_id)
            return Outcome.rejected("The image modal was dismissed", block_id=block_id)
        return self._write_image(block_id, to_data_url(data, mime_type))

    # -------------------------------------------------------------------------
    # Files, video, audio
    # -------------------------------------------------------------------------

    def attach_file(
        self,
        *,
        name: str,
        size_bytes: int,
        mime_type: str,
        url: str,
    ) -> Outcome[None]:
        """Store resolved file metadata and its URL on the modal's block."""
        block_id = self._modal_block(OverlayKind.FILE_MODAL)
        if block_id is None:
            return Outcome.rejected("The file modal is not open")
        return self._write_file(block_id, name=name, size_bytes=size_bytes, mime_type=mime_type, url=url)

    async def upload_file(self, read: FileRead, *, name: str, mime_type: str) -> Outcome[None]:
        block_id = self._modal_block(OverlayKind.FILE_MODAL)
        if block_id is None:
            return Outcome.rejected("The file modal is not open")

        data = await read()
        if not self._menus.is_open(OverlayKind.FILE_MODAL, block_id):
            logger.debug("Dropping file upload for %s: modal dismissed", block_id)
            return Outcome.rejected("The file modal was dismissed", block_id=block_id)
        return self._write_file(
            block_id,
            name=name,
            size_bytes=len(data),
            mime_type=mime_type,
            url=to_data_url(data, mime_type),
        )

    def _modal_block(self, kind: OverlayKind) -> str | None:
        overlay = self._menus.current
        if overlay is None or overlay.kind is not kind:
            return None
        return overlay.block_id

    def _write_image(self, block_id: str, source: str) -> Outcome[None]:
        outcome = self._store.update_block(block_id, {"content": source})
        self._menus.close(OverlayKind.IMAGE_MODAL)
        return outcome

    def _write_file(
        self,
        block_id: str,
        *,
        name: str,
        size_bytes: int,
        mime_type: str,
        url: str,
    ) -> Outcome[None]:
        outcome = self._store.update_block(
            block_id,
            {
                "content": url,
                "fileName": name,
                "fileSize": format_file_size(size_bytes),
                "fileType": mime_type,
            },
        )
        self._menus.close(OverlayKind.FILE_MODAL)
        return outcome

"""Default payloads and fresh blocks for each block type."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from .blocks_models import (
    Block,
    BlockType,
    CalendarPayload,
    ChartPayload,
    MediaPayload,
    Payload,
    TablePayload,
    TodoPayload,
    TogglePayload,
)


def new_block_id() -> str:
    """Generate a new unique block ID."""
    return f"block-{uuid4().hex[:12]}"


def default_payload(block_type: BlockType, *, now: datetime) -> Payload | None:
    """Return the payload a freshly created block of this type starts with."""
    match block_type:
        case BlockType.TODO:
            return TodoPayload(checked=False)
        case BlockType.TOGGLE:
            return TogglePayload()
        case BlockType.TABLE:
            return TablePayload.default()
        case BlockType.CHART_BAR | BlockType.CHART_PIE:
            return ChartPayload.default()
        case BlockType.CALENDAR:
            return CalendarPayload(selected_date=now)
        case BlockType.FILE | BlockType.VIDEO | BlockType.AUDIO:
            return MediaPayload()
        case _:
            return None


def new_block(block_type: BlockType, *, block_id: str, now: datetime) -> Block:
    """Build an empty, left-aligned block with the type's default payload."""
    return Block(
        id=block_id,
        type=block_type,
        content="",
        payload=default_payload(block_type, now=now),
    )

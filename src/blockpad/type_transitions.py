"""Type changes for existing blocks.

Two policies apply, depending on the target type:

- Content-preserving targets (paragraph, headings, quote, code, lists,
  todo, callout) keep `content` and reinitialize their own payload.
- Structured targets (table, charts, calendar, toggle) reset `content`
  and install a fresh payload. A toggle seeds its title from the
  previous content.

Payload data from the previous type is never migrated; building the new
payload from scratch is what clears every field of the old type.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from .block_factory import default_payload
from .blocks_models import (
    STRUCTURED_TYPES,
    Block,
    BlockType,
    TogglePayload,
)


def transition(block: Block, new_type: BlockType, *, now: datetime) -> Block:
    """Return a copy of block converted to new_type.

    Common fields (id, alignment, colours) are kept in every case.
    """
    payload = default_payload(new_type, now=now)

    if new_type in STRUCTURED_TYPES:
        if new_type is BlockType.TOGGLE:
            payload = TogglePayload(toggle_title=block.content)
        content = ""
    else:
        # Media and embed targets hold a URL in content, so it is kept too.
        content = block.content

    return replace(block.copy(), type=new_type, content=content, payload=payload)

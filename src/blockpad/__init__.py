"""Blockpad - a block document model and its editing engine.

A document is an ordered list of typed blocks (paragraphs, headings,
lists, todos, toggles, tables, charts, a calendar, media). This package
owns the structural edits, the table/chart editors, the shared calendar
events, overlay coordination and the slash/format input controllers. A
rendering surface paints from the read model and drives it over
JSON-RPC.
"""

from __future__ import annotations

from .block_store import BlockStore
from .blocks_models import Block, BlockType, CalendarEvent
from .editor import BlockEditor
from .errors import Outcome, OutcomeStatus

__all__ = [
    "Block",
    "BlockEditor",
    "BlockStore",
    "BlockType",
    "CalendarEvent",
    "Outcome",
    "OutcomeStatus",
]

__version__ = "0.1.0"

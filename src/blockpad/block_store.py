"""The ordered block collection and its structural edits.

BlockStore is the single writer of the document. Every command returns
an Outcome instead of silently ignoring unknown ids or guarded calls,
and every applied mutation is followed by a change notification that
carries the full serialized block list.

Invariants held after every command:
- the document has at least one block
- block ids are unique and never reused
- table rows have one cell per header, charts one value per label
- a block only carries the payload of its current type
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Iterable

from .block_factory import new_block, new_block_id
from .blocks_models import (
    COMMON_FIELDS,
    Block,
    BlockType,
    ChartPayload,
    TablePayload,
    TodoPayload,
    TogglePayload,
    merge_payload,
    parse_alignment,
    parse_block_type,
    payload_class_for,
)
from .errors import Outcome, ValidationError
from .menus import MenuCoordinator, OverlayKind, PaletteTarget
from .settings import settings
from .type_transitions import transition

logger = logging.getLogger(__name__)

ChangeListener = Callable[[list[dict[str, Any]]], None]
Mutator = Callable[[Block], "Outcome[Any] | None"]


def local_now() -> datetime:
    """Current time in the local timezone."""
    return datetime.now().astimezone()


@dataclass(frozen=True)
class FocusRequest:
    """Ask the rendering surface to focus a block after its next paint."""

    block_id: str


def invariant_problem(block: Block) -> str | None:
    """Describe the first per-block invariant this block breaks, if any."""
    expected = payload_class_for(block.type)
    if expected is None and block.payload is not None:
        return f"{block.type.value} blocks carry no payload"
    if expected is not None and not isinstance(block.payload, expected):
        return f"{block.type.value} blocks need a {expected.__name__}"
    if isinstance(block.payload, TablePayload) and not block.payload.is_consistent():
        return "Every table row must have one cell per header"
    if isinstance(block.payload, ChartPayload) and not block.payload.is_consistent():
        return "Chart labels and values must have the same length"
    return None


class BlockStore:
    """Owns the ordered block sequence."""

    def __init__(
        self,
        seed: Iterable[Block | dict[str, Any]] | None = None,
        *,
        menus: MenuCoordinator | None = None,
        on_change: ChangeListener | None = None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
        welcome_text: str | None = None,
    ) -> None:
        self._clock = clock or local_now
        self._id_factory = id_factory or new_block_id
        self._menus = menus
        self._listeners: list[ChangeListener] = [on_change] if on_change else []
        self._pending_focus: FocusRequest | None = None
        self._blocks = self._load(seed, welcome_text)
        self._issued_ids: set[str] = {block.id for block in self._blocks}

    def _load(
        self,
        seed: Iterable[Block | dict[str, Any]] | None,
        welcome_text: str | None,
    ) -> list[Block]:
        now = self._clock()
        blocks: list[Block] = []
        seen: set[str] = set()
        for item in seed or []:
            block = item.copy() if isinstance(item, Block) else Block.from_dict(item, now=now)
            if block.id in seen:
                raise ValidationError("Duplicate block id in seed", field="id", value=block.id)
            problem = invariant_problem(block)
            if problem:
                raise ValidationError(problem, field="payload", value=block.id)
            seen.add(block.id)
            blocks.append(block)

        if not blocks:
            text = settings.welcome_text if welcome_text is None else welcome_text
            first = new_block(BlockType.PARAGRAPH, block_id="block-1", now=now)
            blocks.append(replace(first, content=text))
        logger.debug("Loaded document with %d blocks", len(blocks))
        return blocks

    # -------------------------------------------------------------------------
    # Read model
    # -------------------------------------------------------------------------

    @property
    def blocks(self) -> list[Block]:
        return [block.copy() for block in self._blocks]

    def __len__(self) -> int:
        return len(self._blocks)

    def snapshot(self) -> list[dict[str, Any]]:
        """Full serialized block list, in document order."""
        return [block.to_dict() for block in self._blocks]

    def get(self, block_id: str) -> Block | None:
        index = self.index_of(block_id)
        return None if index is None else self._blocks[index].copy()

    def index_of(self, block_id: str) -> int | None:
        for index, block in enumerate(self._blocks):
            if block.id == block_id:
                return index
        return None

    def now(self) -> datetime:
        return self._clock()

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    # -------------------------------------------------------------------------
    # Focus requests
    # -------------------------------------------------------------------------

    @property
    def pending_focus(self) -> FocusRequest | None:
        """The outstanding focus request, if its block still exists."""
        request = self._pending_focus
        if request is None or self.index_of(request.block_id) is None:
            return None
        return request

    def take_focus_request(self) -> FocusRequest | None:
        """Resolve and clear the focus request on the next paint.

        A request whose block has been deleted is dropped.
        """
        request = self.pending_focus
        self._pending_focus = None
        return request

    # -------------------------------------------------------------------------
    # Structural edits
    # -------------------------------------------------------------------------

    def add_block(self, block_type: BlockType | str, after_id: str | None = None) -> Outcome[str]:
        """Insert a new block after after_id, or append it.

        An unknown after_id appends. Closes any open menu and asks the
        rendering surface to focus the new block.
        """
        block_type = parse_block_type(block_type)
        block = new_block(block_type, block_id=self._next_id(), now=self._clock())

        index = self.index_of(after_id) if after_id is not None else None
        if index is None:
            self._blocks.append(block)
        else:
            self._blocks.insert(index + 1, block)

        if self._menus is not None:
            self._menus.close()
        self._pending_focus = FocusRequest(block.id)

        logger.debug("Added %s block %s after %s", block_type.value, block.id, after_id)
        self._notify()
        return Outcome.applied(block.id, block_id=block.id)

    def update_block(self, block_id: str, fields: dict[str, Any]) -> Outcome[None]:
        """Merge fields into a block.

        Accepts the common fields and the fields of the block's current
        payload. Use change_type to switch kinds.
        """
        index = self.index_of(block_id)
        if index is None:
            return self._not_found(block_id)
        if not fields:
            return Outcome.applied(block_id=block_id)

        block = self._blocks[index]
        not_applicable = sorted(set(fields) - block.field_names())
        if not_applicable:
            return self._rejected(
                f"Fields not applicable to {block.type.value}: {', '.join(not_applicable)}",
                block_id,
            )

        try:
            updated = _apply_fields(block, fields)
        except ValidationError as exc:
            return self._rejected(exc.message, block_id)
        return self._commit(index, updated)

    def change_type(self, block_id: str, new_type: BlockType | str) -> Outcome[None]:
        """Retype a block; see type_transitions for the field policy."""
        new_type = parse_block_type(new_type)
        index = self.index_of(block_id)
        if index is None:
            return self._not_found(block_id)
        if self._menus is not None:
            self._menus.close_for_block(block_id, OverlayKind.TYPE_MENU)

        block = self._blocks[index]
        if block.type is new_type:
            return Outcome.applied(block_id=block_id)
        updated = transition(block, new_type, now=self._clock())
        logger.debug("Block %s %s -> %s", block_id, block.type.value, new_type.value)
        return self._commit(index, updated)

    def delete_block(self, block_id: str) -> Outcome[None]:
        """Remove a block unless it is the last one."""
        if self._menus is not None:
            self._menus.close_for_block(block_id, OverlayKind.BLOCK_MENU)
        index = self.index_of(block_id)
        if index is None:
            return self._not_found(block_id)
        if len(self._blocks) == 1:
            return self._rejected("A document keeps at least one block", block_id)

        del self._blocks[index]
        if self._menus is not None:
            self._menus.close_for_block(block_id)
        if self._pending_focus is not None and self._pending_focus.block_id == block_id:
            self._pending_focus = None

        logger.debug("Deleted block %s", block_id)
        self._notify()
        return Outcome.applied(block_id=block_id)

    def move_block(self, from_index: int, to_index: int) -> Outcome[None]:
        """Move the block at from_index to to_index in one splice."""
        size = len(self._blocks)
        for name, value in (("from_index", from_index), ("to_index", to_index)):
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < size:
                return self._rejected(f"{name} {value!r} is outside 0..{size - 1}")

        moved = self._blocks[from_index]
        if from_index == to_index:
            return Outcome.applied(block_id=moved.id)

        self._blocks.insert(to_index, self._blocks.pop(from_index))
        logger.debug("Moved block %s from %d to %d", moved.id, from_index, to_index)
        self._notify()
        return Outcome.applied(block_id=moved.id)

    def toggle_checked(self, block_id: str) -> Outcome[None]:
        def flip(block: Block) -> Outcome[None] | None:
            if not isinstance(block.payload, TodoPayload):
                return Outcome.rejected(f"{block.type.value} blocks have no checkbox", block_id=block_id)
            block.payload.checked = not block.payload.checked
            return None

        return self.mutate(block_id, flip)

    def toggle_collapsed(self, block_id: str) -> Outcome[None]:
        def flip(block: Block) -> Outcome[None] | None:
            if not isinstance(block.payload, TogglePayload):
                return Outcome.rejected(f"{block.type.value} blocks cannot collapse", block_id=block_id)
            block.payload.collapsed = not block.payload.collapsed
            return None

        return self.mutate(block_id, flip)

    def set_alignment(self, block_id: str, alignment: str) -> Outcome[None]:
        return self.update_block(block_id, {"alignment": alignment})

    def set_color(
        self,
        block_id: str,
        value: str | None,
        target: PaletteTarget | str = PaletteTarget.TEXT,
    ) -> Outcome[None]:
        """Set the text or background colour; closes the colour palette."""
        target = PaletteTarget(target)
        key = "color" if target is PaletteTarget.TEXT else "backgroundColor"
        outcome = self.update_block(block_id, {key: value})
        if outcome.ok and self._menus is not None:
            self._menus.close(OverlayKind.COLOR_PALETTE)
        return outcome

    # -------------------------------------------------------------------------
    # Commit path
    # -------------------------------------------------------------------------

    def mutate(self, block_id: str, mutator: Mutator) -> Outcome[Any]:
        """Run mutator on a working copy and commit it if invariants hold.

        The mutator edits the copy in place. Returning a non-applied
        Outcome abandons the edit; returning an applied Outcome (or None)
        commits it, and that outcome is passed back to the caller.
        """
        index = self.index_of(block_id)
        if index is None:
            return self._not_found(block_id)

        working = self._blocks[index].copy()
        outcome = mutator(working) or Outcome.applied(block_id=block_id)
        if not outcome.ok:
            logger.debug("Block %s edit rejected: %s", block_id, outcome.reason)
            return outcome
        if working.id != block_id:
            return self._rejected("Block ids cannot change", block_id)

        committed = self._commit(index, working)
        if not committed.ok:
            return committed
        if outcome.block_id is None:
            outcome = replace(outcome, block_id=block_id)
        return outcome

    def _commit(self, index: int, updated: Block) -> Outcome[None]:
        problem = invariant_problem(updated)
        if problem:
            return self._rejected(problem, updated.id)
        if updated == self._blocks[index]:
            return Outcome.applied(block_id=updated.id)
        self._blocks[index] = updated
        self._notify()
        return Outcome.applied(block_id=updated.id)

    def _next_id(self) -> str:
        block_id = self._id_factory()
        while block_id in self._issued_ids:
            block_id = self._id_factory()
        self._issued_ids.add(block_id)
        return block_id

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    def _not_found(self, block_id: str) -> Outcome[Any]:
        logger.debug("Block %s not found", block_id)
        return Outcome.not_found(block_id)

    def _rejected(self, reason: str, block_id: str | None = None) -> Outcome[Any]:
        logger.debug("Rejected command on %s: %s", block_id, reason)
        return Outcome.rejected(reason, block_id=block_id)


def _apply_fields(block: Block, fields: dict[str, Any]) -> Block:
    """Return a copy of block with wire fields merged in.

    Raises:
        ValidationError: If a value is malformed.
    """
    updated = block.copy()
    common = {k: v for k, v in fields.items() if k in COMMON_FIELDS}
    payload_fields = {k: v for k, v in fields.items() if k not in COMMON_FIELDS}

    if "content" in common:
        if not isinstance(common["content"], str):
            raise ValidationError("content must be a string", field="content")
        updated.content = common["content"]
    if "alignment" in common:
        updated.alignment = parse_alignment(common["alignment"])
    for key, attr in (("color", "color"), ("backgroundColor", "background_color")):
        if key in common:
            value = common[key]
            if value is not None and not isinstance(value, str):
                raise ValidationError(f"{key} must be a string or null", field=key)
            setattr(updated, attr, value)

    if payload_fields and updated.payload is not None:
        updated.payload = merge_payload(updated.payload, payload_fields)
    return updated

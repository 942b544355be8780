"""Tests for type_transitions.py - the field policy of type changes."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from blockpad.blocks_models import (
    Alignment,
    Block,
    BlockType,
    CalendarPayload,
    ChartPayload,
    MediaPayload,
    TablePayload,
    TodoPayload,
    TogglePayload,
)
from blockpad.type_transitions import transition

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def styled_paragraph() -> Block:
    return Block(
        id="b1",
        type=BlockType.PARAGRAPH,
        content="hello",
        alignment=Alignment.CENTER,
        color="#2563EB",
        background_color="#DBEAFE",
    )


class TestContentPreserving:
    @pytest.mark.parametrize("target", [
        BlockType.HEADING_1, BlockType.QUOTE, BlockType.CODE, BlockType.LIST,
        BlockType.NUMBERED_LIST, BlockType.CALLOUT,
    ])
    def test_keeps_content_without_payload(self, styled_paragraph: Block, target: BlockType) -> None:
        result = transition(styled_paragraph, target, now=NOW)

        assert result.type is target
        assert result.content == "hello"
        assert result.payload is None

    def test_todo_starts_unchecked(self, styled_paragraph: Block) -> None:
        result = transition(styled_paragraph, BlockType.TODO, now=NOW)

        assert result.content == "hello"
        assert result.payload == TodoPayload(checked=False)

    def test_common_fields_survive(self, styled_paragraph: Block) -> None:
        result = transition(styled_paragraph, BlockType.TABLE, now=NOW)

        assert result.id == "b1"
        assert result.alignment is Alignment.CENTER
        assert result.color == "#2563EB"
        assert result.background_color == "#DBEAFE"

    def test_media_target_keeps_content(self, styled_paragraph: Block) -> None:
        result = transition(styled_paragraph, BlockType.VIDEO, now=NOW)

        assert result.content == "hello"
        assert result.payload == MediaPayload()


class TestStructured:
    def test_table(self, styled_paragraph: Block) -> None:
        result = transition(styled_paragraph, BlockType.TABLE, now=NOW)

        assert result.content == ""
        assert result.payload == TablePayload.default()

    def test_chart(self, styled_paragraph: Block) -> None:
        result = transition(styled_paragraph, BlockType.CHART_BAR, now=NOW)

        assert result.content == ""
        assert result.payload == ChartPayload.default()

    def test_calendar_selects_now(self, styled_paragraph: Block) -> None:
        result = transition(styled_paragraph, BlockType.CALENDAR, now=NOW)

        assert result.payload == CalendarPayload(selected_date=NOW)

    def test_toggle_takes_title_from_content(self, styled_paragraph: Block) -> None:
        result = transition(styled_paragraph, BlockType.TOGGLE, now=NOW)

        assert result.content == ""
        assert result.payload == TogglePayload(toggle_title="hello")

    def test_table_to_chart_discards_rows(self) -> None:
        """Structured data is never carried between structured types."""
        table = Block(
            id="t",
            type=BlockType.TABLE,
            payload=TablePayload(headers=["Q1"], rows=[["100"]]),
        )

        result = transition(table, BlockType.CHART_PIE, now=NOW)

        assert result.payload == ChartPayload.default()

    def test_original_is_untouched(self, styled_paragraph: Block) -> None:
        transition(styled_paragraph, BlockType.TABLE, now=NOW)

        assert styled_paragraph.content == "hello"
        assert styled_paragraph.payload is None

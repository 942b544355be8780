"""Tests for selection_format.py - the inline format overlay."""

from __future__ import annotations

import pytest

from blockpad.errors import OutcomeStatus
from blockpad.menus import OverlayKind, Point
from blockpad.selection_format import FormatCommand, SelectionFormatController, SelectionRect


class FakeSurface:
    """Records host edit commands and returns canned markup."""

    def __init__(self, markup: str | None) -> None:
        self.markup = markup
        self.commands: list[tuple[str, str | None]] = []

    def exec_command(self, command: str, value: str | None = None) -> None:
        self.commands.append((command, value))

    def serialize(self, block_id: str) -> str | None:
        return self.markup


@pytest.fixture
def formatting(make_store, menus):
    store = make_store([{"id": "b1", "type": "paragraph", "content": "plain words"}])
    return store, SelectionFormatController(store, menus)


RECT = SelectionRect(left=100, top=50, width=40, height=16)


class TestOnSelection:
    def test_opens_overlay_above_selection(self, formatting, menus) -> None:
        _, controller = formatting

        assert controller.on_selection("b1", RECT)

        assert menus.current.kind is OverlayKind.FORMAT_MENU
        assert menus.current.anchor == Point(120, 40)

    @pytest.mark.parametrize("rect,collapsed", [
        (SelectionRect(0, 0, 0, 10), False),
        (RECT, True),
        (None, False),
    ])
    def test_empty_selection_closes_overlay(self, formatting, menus, rect, collapsed) -> None:
        _, controller = formatting
        controller.on_selection("b1", RECT)

        assert not controller.on_selection("b1", rect, collapsed=collapsed)
        assert menus.current is None


class TestApply:
    def test_bold_writes_serialized_content(self, formatting, menus) -> None:
        store, controller = formatting
        controller.on_selection("b1", RECT)
        surface = FakeSurface("<b>plain</b> words")

        outcome = controller.apply("bold", surface)

        assert outcome.ok
        assert surface.commands == [("bold", None)]
        assert store.get("b1").content == "<b>plain</b> words"
        assert menus.current is None

    def test_link_uses_create_link(self, formatting) -> None:
        _, controller = formatting
        controller.on_selection("b1", RECT)
        surface = FakeSurface('<a href="https://example.com">plain</a> words')

        controller.apply(FormatCommand.LINK, surface, prompt_url=lambda: " https://example.com ")

        assert surface.commands == [("createLink", "https://example.com")]

    def test_link_without_url_is_abandoned(self, formatting, menus, changes) -> None:
        _, controller = formatting
        controller.on_selection("b1", RECT)
        surface = FakeSurface("unused")

        outcome = controller.apply("link", surface, prompt_url=lambda: "")

        assert outcome.status is OutcomeStatus.REJECTED
        assert surface.commands == []
        assert menus.current is None
        assert changes.count == 0

    def test_without_selection(self, formatting) -> None:
        _, controller = formatting

        assert controller.apply("italic", FakeSurface("x")).status is OutcomeStatus.REJECTED

    def test_deleted_block_is_not_found(self, formatting) -> None:
        store, controller = formatting
        store.add_block("paragraph")
        controller.on_selection("b1", RECT)
        store.delete_block("b1")

        assert controller.apply("underline", FakeSurface("x")).status is OutcomeStatus.NOT_FOUND

    def test_apply_after_overlay_closed_is_rejected(self, formatting, menus, changes) -> None:
        """An outside click ends the selection; a late command writes nothing."""
        store, controller = formatting
        controller.on_selection("b1", RECT)
        menus.pointer_down_outside()
        surface = FakeSurface("<b>plain</b> words")

        outcome = controller.apply("bold", surface)

        assert outcome.status is OutcomeStatus.REJECTED
        assert surface.commands == []
        assert store.get("b1").content == "plain words"
        assert changes.count == 0

    def test_apply_for_other_blocks_overlay_is_rejected(self, formatting, menus) -> None:
        store, controller = formatting
        controller.on_selection("b1", RECT)
        menus.open(OverlayKind.FORMAT_MENU, "elsewhere")

        assert controller.apply("code", FakeSurface("x")).status is OutcomeStatus.REJECTED
        assert store.get("b1").content == "plain words"

    def test_unknown_command_raises(self, formatting) -> None:
        _, controller = formatting
        controller.on_selection("b1", RECT)

        with pytest.raises(ValueError):
            controller.apply("blink", FakeSurface("x"))

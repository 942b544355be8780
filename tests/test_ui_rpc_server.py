"""Tests for the stdio JSON-RPC server."""

from __future__ import annotations

import io
import json

import pytest

from blockpad.editor import BlockEditor
from blockpad.rpc.types import INVALID_PARAMS, INVALID_REQUEST, METHOD_NOT_FOUND, PARSE_ERROR
from blockpad.ui_rpc_server import StdioServer, handle_jsonrpc_request


@pytest.fixture
def editor(make_editor) -> BlockEditor:
    return make_editor([
        {"id": "b1", "type": "paragraph", "content": "hello"},
        {"id": "cal", "type": "calendar"},
    ])


def serve(editor: BlockEditor, *requests) -> list[dict]:
    lines = [r if isinstance(r, str) else json.dumps(r) for r in requests]
    stdout = io.StringIO()
    StdioServer(editor, stdin=io.StringIO("\n".join(lines) + "\n"), stdout=stdout).serve_forever()
    return [json.loads(line) for line in stdout.getvalue().splitlines()]


class TestHandleRequest:
    def test_result(self, editor: BlockEditor) -> None:
        resp = handle_jsonrpc_request(editor, {"jsonrpc": "2.0", "id": 1, "method": "document/get"})

        assert resp["id"] == 1
        assert resp["result"]["blocks"][0]["content"] == "hello"

    def test_unknown_method(self, editor: BlockEditor) -> None:
        resp = handle_jsonrpc_request(editor, {"jsonrpc": "2.0", "id": 2, "method": "blocks/explode"})

        assert resp["error"]["code"] == METHOD_NOT_FOUND

    def test_params_must_be_object(self, editor: BlockEditor) -> None:
        resp = handle_jsonrpc_request(editor, {"jsonrpc": "2.0", "id": 3, "method": "blocks/add", "params": ["todo"]})

        assert resp["error"]["code"] == INVALID_PARAMS

    def test_unknown_parameter(self, editor: BlockEditor) -> None:
        resp = handle_jsonrpc_request(editor, {
            "jsonrpc": "2.0",
            "id": 4,
            "method": "blocks/delete",
            "params": {"block_id": "b1", "force": True},
        })

        assert resp["error"]["code"] == INVALID_PARAMS

    def test_notification_has_no_response(self, editor: BlockEditor) -> None:
        resp = handle_jsonrpc_request(editor, {
            "jsonrpc": "2.0",
            "method": "blocks/add",
            "params": {"type": "quote"},
        })

        assert resp is None
        assert len(editor.store) == 3


class TestStdioServer:
    def test_change_notification_precedes_response(self, editor: BlockEditor) -> None:
        out = serve(editor, {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "blocks/update",
            "params": {"block_id": "b1", "fields": {"content": "bye"}},
        })

        assert out[0]["method"] == "document/changed"
        assert out[0]["params"]["blocks"][0]["content"] == "bye"
        assert out[1] == {"jsonrpc": "2.0", "id": 1, "result": {"status": "applied", "blockId": "b1"}}

    def test_rejected_command_sends_no_notification(self, editor: BlockEditor) -> None:
        out = serve(editor, {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "blocks/delete",
            "params": {"block_id": "missing"},
        })

        assert len(out) == 1
        assert out[0]["result"]["status"] == "not_found"

    def test_calendar_changes_are_announced(self, editor: BlockEditor) -> None:
        out = serve(editor, {
            "jsonrpc": "2.0",
            "id": 7,
            "method": "calendar/events/create",
            "params": {"form": {"title": "Demo", "date": "2024-03-15"}},
        })

        assert out[0]["method"] == "calendar/changed"
        assert out[0]["params"]["events"][0]["title"] == "Demo"
        assert out[1]["id"] == 7

    def test_parse_error_and_bad_request(self, editor: BlockEditor) -> None:
        out = serve(editor, "{oops", "[1, 2]", "")

        assert out[0]["error"]["code"] == PARSE_ERROR
        assert out[1]["error"]["code"] == INVALID_REQUEST

    def test_multiple_requests(self, editor: BlockEditor) -> None:
        out = serve(
            editor,
            {"jsonrpc": "2.0", "id": 1, "method": "editor/state"},
            {"jsonrpc": "2.0", "id": 2, "method": "menus/toggle", "params": {"kind": "blockMenu", "block_id": "b1"}},
            {"jsonrpc": "2.0", "id": 3, "method": "editor/state"},
        )

        assert [r["id"] for r in out] == [1, 2, 3]
        assert out[0]["result"]["overlay"] is None
        assert out[2]["result"]["overlay"] == {"kind": "blockMenu", "blockId": "b1"}

"""JSON-RPC 2.0 over stdio for the rendering surface.

One request per line on stdin, one response per line on stdout. After
every request that changed the document, a `document/changed`
notification carrying the full block list is written before the
response (and `calendar/changed` with the events, when they changed),
so the surface always paints from an authoritative snapshot.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from typing import Any, TextIO

from .editor import BlockEditor
from .rpc.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    JSON,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    RpcError,
    jsonrpc_error,
    jsonrpc_notification,
    jsonrpc_result,
)
from .rpc_handlers import METHODS

logger = logging.getLogger(__name__)


def handle_jsonrpc_request(editor: BlockEditor, req: JSON) -> JSON | None:
    """Dispatch one request; returns None for notifications."""
    method = req.get("method")
    req_id = req.get("id")
    params = req.get("params")

    correlation_id = uuid.uuid4().hex[:12]
    logger.debug("RPC request [%s] method=%s req_id=%s", correlation_id, method, req_id)

    try:
        if not isinstance(method, str):
            raise RpcError(code=INVALID_REQUEST, message="method must be a string")
        handler = METHODS.get(method)
        if handler is None:
            raise RpcError(code=METHOD_NOT_FOUND, message=f"Method not found: {method}")
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise RpcError(code=INVALID_PARAMS, message="params must be an object")

        result = handler(editor, **params)
        if req_id is None:
            return None
        return jsonrpc_result(req_id, result)

    except RpcError as exc:
        logger.warning(
            "RPC error [%s] method=%s code=%d: %s",
            correlation_id,
            method,
            exc.code,
            exc.message,
        )
        if req_id is None:
            return None
        return jsonrpc_error(req_id, exc)

    except Exception as exc:
        logger.exception("RPC internal error [%s] method=%s", correlation_id, method)
        if req_id is None:
            return None
        return jsonrpc_error(
            req_id,
            RpcError(
                code=INTERNAL_ERROR,
                message=f"Internal error: {exc}",
                data={"correlation_id": correlation_id},
            ),
        )


class StdioServer:
    """Reads requests from one stream and writes responses to another."""

    def __init__(self, editor: BlockEditor, *, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self.editor = editor
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._changed: list[dict[str, Any]] | None = None
        self._events_changed: list[dict[str, Any]] | None = None
        editor.store.subscribe(self._on_change)
        editor.calendar.subscribe(self._on_events_change)

    def _on_change(self, snapshot: list[dict[str, Any]]) -> None:
        self._changed = snapshot

    def _on_events_change(self, snapshot: list[dict[str, Any]]) -> None:
        self._events_changed = snapshot

    def _write(self, obj: Any) -> None:
        try:
            self._stdout.write(json.dumps(obj, ensure_ascii=False, default=str) + "\n")
            self._stdout.flush()
        except BrokenPipeError:
            # Client closed the pipe (e.g., UI exited). Treat as a clean shutdown.
            raise SystemExit(0) from None

    def handle_line(self, line: str) -> None:
        line = line.strip()
        if not line:
            return
        try:
            req = json.loads(line)
        except json.JSONDecodeError:
            self._write(jsonrpc_error(None, RpcError(code=PARSE_ERROR, message="Parse error")))
            return
        if not isinstance(req, dict):
            self._write(jsonrpc_error(None, RpcError(code=INVALID_REQUEST, message="Request must be an object")))
            return

        self._changed = None
        self._events_changed = None
        resp = handle_jsonrpc_request(self.editor, req)
        if self._changed is not None:
            self._write(jsonrpc_notification("document/changed", {"blocks": self._changed}))
            self._changed = None
        if self._events_changed is not None:
            self._write(jsonrpc_notification("calendar/changed", {"events": self._events_changed}))
            self._events_changed = None
        if resp is not None:
            self._write(resp)

    def serve_forever(self) -> None:
        while True:
            line = self._stdin.readline()
            if not line:
                logger.info("stdin closed, shutting down")
                return
            self.handle_line(line)

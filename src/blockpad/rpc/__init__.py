"""JSON-RPC plumbing shared by the handlers and the stdio server."""

from __future__ import annotations

from .types import RpcError

__all__ = ["RpcError"]

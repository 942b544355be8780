"""RPC handler modules for ui_rpc_server.

This package contains handler functions organized by domain:
- blocks: structural edits, drag reorder, read model
- grids: table and chart editors
- calendar: shared calendar events
- overlays: menus, slash commands, formatting, media modals
"""

from __future__ import annotations

from types import ModuleType
from typing import Callable

from blockpad.rpc.types import RpcError

from . import blocks, calendar, grids, overlays

__all__ = ["RpcError", "METHODS"]


def _collect(*modules: ModuleType) -> dict[str, Callable]:
    methods: dict[str, Callable] = {}
    for module in modules:
        for value in vars(module).values():
            name = getattr(value, "rpc_method", None)
            if isinstance(name, str):
                methods[name] = value
    return methods


# Method name -> handler(editor, **params)
METHODS: dict[str, Callable] = _collect(blocks, grids, calendar, overlays)

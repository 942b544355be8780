"""Base utilities for RPC handlers.

Provides the decorator that standardizes error handling across all
handler modules, and the conversion of command outcomes to results.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import TYPE_CHECKING, Any, Callable

from blockpad.errors import BlockpadError, Outcome, get_error_code
from blockpad.rpc.types import INTERNAL_ERROR, INVALID_PARAMS, RpcError

if TYPE_CHECKING:
    from blockpad.editor import BlockEditor

logger = logging.getLogger(__name__)


def rpc_handler(method_name: str) -> Callable:
    """Decorator that converts domain errors to RpcError.

    1. Propagates RpcError unchanged
    2. Converts BlockpadError to a structured RpcError
    3. Converts ValueError/TypeError to a parameter error (-32602)
    4. Logs and converts unexpected exceptions to an internal error (-32603)

    Usage:
        @rpc_handler("blocks/add")
        def handle_blocks_add(editor: BlockEditor, *, type: str) -> dict:
            ...
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(editor: "BlockEditor", **kwargs: Any) -> Any:
            try:
                return func(editor, **kwargs)
            except RpcError:
                raise
            except BlockpadError as e:
                raise RpcError(
                    code=get_error_code(e),
                    message=e.message,
                    data=e.to_dict(),
                ) from e
            except ValueError as e:
                raise RpcError(code=INVALID_PARAMS, message=str(e)) from e
            except TypeError as e:
                raise RpcError(code=INVALID_PARAMS, message=f"Invalid parameter: {e}") from e
            except Exception as e:
                logger.error(
                    "Internal error in RPC handler %s: %s",
                    method_name,
                    e,
                    exc_info=True,
                )
                raise RpcError(
                    code=INTERNAL_ERROR,
                    message=f"Internal error in {method_name}",
                    data={"error_type": type(e).__name__},
                ) from e

        wrapper.rpc_method = method_name  # type: ignore[attr-defined]
        return wrapper

    return decorator


def outcome_result(outcome: Outcome[Any], **extra: Any) -> dict[str, Any]:
    """Serialize an Outcome, plus any extra result fields."""
    result = outcome.to_dict()
    result.update({k: v for k, v in extra.items() if v is not None})
    return result


def require_object(value: Any, name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise RpcError(INVALID_PARAMS, f"{name} must be an object")
    return value

"""Blockpad Error Hierarchy.

Provides a structured error hierarchy for the block editor:
- BlockpadError: Base exception for all application errors
- ValidationError: Malformed seeds, payloads or parameters
- NotFoundError: A block or event id that is not in the document
- InvariantError: A mutation that would break a document invariant
- ConfigurationError: Configuration/setup issues

Commands on the store never raise for ordinary edge cases. They return
an Outcome, which distinguishes applied, not-found and rejected calls.
Outcome.unwrap() converts the latter two into the exceptions above.

Usage:
    from blockpad.errors import Outcome

    outcome = store.delete_block(block_id)
    if outcome.status is OutcomeStatus.REJECTED:
        logger.debug("Delete refused: %s", outcome.reason)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from .rpc.types import (
    APPLICATION_ERROR,
    CONFIGURATION_ERROR,
    INVALID_PARAMS,
    INVARIANT_ERROR,
    NOT_FOUND_ERROR,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Error Base Classes
# =============================================================================


class BlockpadError(Exception):
    """Base exception for all Blockpad application errors.

    Attributes:
        message: Human-readable error description
        recoverable: Whether the operation can be retried with other input
        context: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        *,
        recoverable: bool = True,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured dictionary for RPC responses."""
        return {
            "type": type(self).__name__.lower().replace("error", ""),
            "message": self.message,
            "recoverable": self.recoverable,
            **{k: v for k, v in self.context.items() if v is not None},
        }


class ValidationError(BlockpadError):
    """Input validation failed.

    Example:
        raise ValidationError("Unknown block type", field="type", value="banner")
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = _truncate(str(value), 100)
        super().__init__(message, recoverable=True, context=context)
        self.field = field


class NotFoundError(BlockpadError):
    """Block or event not found."""

    def __init__(
        self,
        message: str,
        *,
        resource_type: str | None = None,
        resource_id: str | None = None,
    ) -> None:
        super().__init__(
            message,
            recoverable=True,
            context={"resource_type": resource_type, "resource_id": resource_id},
        )
        self.resource_id = resource_id


class InvariantError(BlockpadError):
    """A command was refused because it would break a document invariant."""

    def __init__(
        self,
        message: str,
        *,
        block_id: str | None = None,
    ) -> None:
        super().__init__(message, recoverable=True, context={"block_id": block_id})
        self.block_id = block_id


class ConfigurationError(BlockpadError):
    """Configuration or setup issue."""

    def __init__(
        self,
        message: str,
        *,
        setting: str | None = None,
        expected: str | None = None,
    ) -> None:
        super().__init__(
            message,
            recoverable=False,
            context={"setting": setting, "expected": expected},
        )


# =============================================================================
# Explicit command outcomes
# =============================================================================


class OutcomeStatus(str, Enum):
    APPLIED = "applied"
    NOT_FOUND = "not_found"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a command against the document.

    Makes the three possible results explicit instead of silently
    ignoring unknown ids or guarded calls:

        Applied             the command ran (value carries any result)
        NotFound(id)        the target id is not in the document
        RejectedByInvariant the command would break an invariant or is
                            not applicable to the target
    """

    status: OutcomeStatus
    value: T | None = None
    block_id: str | None = None
    reason: str | None = None

    @classmethod
    def applied(cls, value: T | None = None, *, block_id: str | None = None) -> "Outcome[T]":
        return cls(status=OutcomeStatus.APPLIED, value=value, block_id=block_id)

    @classmethod
    def not_found(cls, block_id: str) -> "Outcome[T]":
        return cls(
            status=OutcomeStatus.NOT_FOUND,
            block_id=block_id,
            reason=f"No item with id {block_id!r}",
        )

    @classmethod
    def rejected(cls, reason: str, *, block_id: str | None = None) -> "Outcome[T]":
        return cls(status=OutcomeStatus.REJECTED, block_id=block_id, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.APPLIED

    def unwrap(self) -> T | None:
        """Get the value or raise the matching error.

        Raises:
            NotFoundError: If the target id was not found.
            InvariantError: If the command was rejected.
        """
        if self.status is OutcomeStatus.APPLIED:
            return self.value
        logger.debug("Unwrapping %s outcome for %s: %s", self.status.value, self.block_id, self.reason)
        if self.status is OutcomeStatus.NOT_FOUND:
            raise NotFoundError(
                self.reason or "Not found",
                resource_type="block",
                resource_id=self.block_id,
            )
        raise InvariantError(self.reason or "Rejected", block_id=self.block_id)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"status": self.status.value}
        if self.block_id is not None:
            result["blockId"] = self.block_id
        if self.reason is not None:
            result["reason"] = self.reason
        return result


# =============================================================================
# RPC mapping
# =============================================================================


_ERROR_CODES: dict[type[BlockpadError], int] = {
    ValidationError: INVALID_PARAMS,
    NotFoundError: NOT_FOUND_ERROR,
    InvariantError: INVARIANT_ERROR,
    ConfigurationError: CONFIGURATION_ERROR,
}


def get_error_code(error: BlockpadError) -> int:
    """Map a domain error onto a JSON-RPC error code."""
    for error_type, code in _ERROR_CODES.items():
        if isinstance(error, error_type):
            return code
    return APPLICATION_ERROR


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."

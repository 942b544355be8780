from __future__ import annotations

import pytest

from blockpad.errors import (
    BlockpadError,
    ConfigurationError,
    InvariantError,
    NotFoundError,
    Outcome,
    OutcomeStatus,
    ValidationError,
    get_error_code,
)


def test_validation_error_to_dict() -> None:
    err = ValidationError("Unknown block type", field="type", value="x" * 200)

    data = err.to_dict()

    assert data["type"] == "validation"
    assert data["field"] == "type"
    assert data["recoverable"] is True
    assert len(data["value"]) == 100
    assert data["value"].endswith("...")


def test_not_found_omits_empty_context() -> None:
    data = NotFoundError("gone", resource_id="b1").to_dict()

    assert data == {"type": "notfound", "message": "gone", "recoverable": True, "resource_id": "b1"}


def test_configuration_error_is_not_recoverable() -> None:
    assert ConfigurationError("bad", setting="BLOCKPAD_LOG_LEVEL").recoverable is False


@pytest.mark.parametrize("error,code", [
    (ValidationError("v"), -32602),
    (NotFoundError("n"), -32003),
    (InvariantError("i"), -32005),
    (ConfigurationError("c"), -32006),
    (BlockpadError("b"), -32000),
])
def test_error_codes(error: BlockpadError, code: int) -> None:
    assert get_error_code(error) == code


def test_outcome_constructors() -> None:
    assert Outcome.applied(3, block_id="b1").to_dict() == {"status": "applied", "blockId": "b1"}
    assert Outcome.applied(3).value == 3
    assert Outcome.not_found("b9").status is OutcomeStatus.NOT_FOUND
    rejected = Outcome.rejected("too few rows", block_id="t1")
    assert not rejected.ok
    assert rejected.to_dict() == {"status": "rejected", "blockId": "t1", "reason": "too few rows"}


def test_outcome_unwrap() -> None:
    assert Outcome.applied("x").unwrap() == "x"

    with pytest.raises(NotFoundError) as not_found:
        Outcome.not_found("b9").unwrap()
    assert not_found.value.resource_id == "b9"

    with pytest.raises(InvariantError) as rejected:
        Outcome.rejected("floor", block_id="b1").unwrap()
    assert rejected.value.block_id == "b1"

"""Tests for the blockpad console entry point."""

from __future__ import annotations

import io
import json
import sys
from pathlib import Path

import pytest

import blockpad.__main__ as cli


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)


def test_missing_seed_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--seed", str(tmp_path / "nope.json")]) == 1
    assert "cannot read" in capsys.readouterr().err


def test_invalid_seed(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    seed = tmp_path / "doc.json"
    seed.write_text(json.dumps([{"id": "a", "type": "banner"}]), encoding="utf-8")

    assert cli.main(["--seed", str(seed)]) == 1
    assert "Unknown block type" in capsys.readouterr().err


def test_serves_until_stdin_closes(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    seed = tmp_path / "doc.json"
    seed.write_text(json.dumps([{"id": "a", "type": "quote", "content": "q"}]), encoding="utf-8")
    request = {"jsonrpc": "2.0", "id": 1, "method": "document/get"}
    monkeypatch.setattr(sys, "stdin", io.StringIO(json.dumps(request) + "\n"))

    assert cli.main(["--seed", str(seed)]) == 0

    response = json.loads(capsys.readouterr().out.splitlines()[0])
    assert response["result"]["blocks"][0]["content"] == "q"


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--version"])

    assert exc_info.value.code == 0
    assert "blockpad 0.1.0" in capsys.readouterr().out

"""Tests for settings.py and logging_setup.py."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

import blockpad.logging_setup as logging_setup
from blockpad.errors import ConfigurationError
from blockpad.settings import Settings, _default_data_dir, _env_bool


@pytest.fixture
def fresh_logging() -> Iterator[logging.Logger]:
    """Let configure_logging run again and drop the handlers it adds."""
    logger = logging.getLogger("blockpad")
    handlers = list(logger.handlers)
    level = logger.level
    logging_setup._configured = False
    yield logger
    for handler in logger.handlers[len(handlers):]:
        handler.close()
    logger.handlers = handlers
    logger.setLevel(level)
    logging_setup._configured = False


class TestSettings:
    @pytest.mark.parametrize("raw,expected", [
        ("1", True), ("yes", True), ("ON", True),
        ("0", False), ("off", False), ("maybe", True),
    ])
    def test_env_bool(self, monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
        monkeypatch.setenv("BLOCKPAD_TEST_FLAG", raw)

        assert _env_bool("BLOCKPAD_TEST_FLAG", True) is expected

    def test_env_bool_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("BLOCKPAD_TEST_FLAG", raising=False)

        assert _env_bool("BLOCKPAD_TEST_FLAG") is False

    def test_data_dir_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("BLOCKPAD_DATA_DIR", str(tmp_path))

        assert _default_data_dir() == tmp_path
        assert Settings().log_path == tmp_path / "blockpad.log"

    def test_data_dir_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("BLOCKPAD_DATA_DIR", raising=False)

        assert _default_data_dir() == Path.home() / ".blockpad"


class TestConfigureLogging:
    def test_writes_rotating_log_file(self, fresh_logging: logging.Logger, tmp_path: Path) -> None:
        settings = Settings(data_dir=tmp_path / "data", log_to_file=True)

        logging_setup.configure_logging(settings, level="debug")
        logging.getLogger("blockpad.block_store").debug("hello from a test")
        for handler in fresh_logging.handlers:
            handler.flush()

        assert fresh_logging.level == logging.DEBUG
        assert "hello from a test" in settings.log_path.read_text(encoding="utf-8")

    def test_is_idempotent(self, fresh_logging: logging.Logger, tmp_path: Path) -> None:
        settings = Settings(data_dir=tmp_path, log_to_file=False)
        before = len(fresh_logging.handlers)

        logging_setup.configure_logging(settings)
        logging_setup.configure_logging(settings)

        assert len(fresh_logging.handlers) == before + 1

    def test_unknown_level(self, fresh_logging: logging.Logger, tmp_path: Path) -> None:
        settings = Settings(data_dir=tmp_path, log_to_file=False)

        with pytest.raises(ConfigurationError):
            logging_setup.configure_logging(settings, level="CHATTY")

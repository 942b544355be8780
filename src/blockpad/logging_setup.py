"""Logging configuration for the editor service.

stdout carries JSON-RPC responses, so log output goes to stderr and,
optionally, to a rotating file under the data directory.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler

from .errors import ConfigurationError
from .settings import Settings, settings as default_settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_configured = False


def configure_logging(settings: Settings | None = None, *, level: str | None = None) -> None:
    """Install stderr and rotating-file handlers on the package logger.

    Safe to call more than once; only the first call installs handlers.

    Raises:
        ConfigurationError: If the log level name is not recognised.
    """
    global _configured
    if _configured:
        return

    settings = settings or default_settings
    level_name = (level or settings.log_level).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ConfigurationError(
            f"Unknown log level: {level_name}",
            setting="BLOCKPAD_LOG_LEVEL",
            expected="DEBUG, INFO, WARNING or ERROR",
        )

    root = logging.getLogger("blockpad")
    root.setLevel(numeric_level)
    formatter = logging.Formatter(_FORMAT)

    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(formatter)
    root.addHandler(stream)

    if settings.log_to_file:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            settings.log_path,
            maxBytes=settings.log_max_bytes,
            backupCount=settings.log_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    _configured = True
    root.debug("Logging configured at %s", level_name)

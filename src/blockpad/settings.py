from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    if val in {"1", "true", "yes", "y", "on"}:
        return True
    if val in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _default_data_dir() -> Path:
    raw = os.environ.get("BLOCKPAD_DATA_DIR")
    if raw:
        return Path(raw)
    return Path.home() / ".blockpad"


@dataclass(frozen=True)
class Settings:
    """Static settings for the editor service.

    Everything is read from the environment once, at import time.
    """

    data_dir: Path = field(default_factory=_default_data_dir)
    log_level: str = os.environ.get("BLOCKPAD_LOG_LEVEL", "INFO")
    log_to_file: bool = _env_bool("BLOCKPAD_LOG_TO_FILE", True)
    log_max_bytes: int = int(os.environ.get("BLOCKPAD_LOG_MAX_BYTES", str(1_000_000)))
    log_backup_count: int = int(os.environ.get("BLOCKPAD_LOG_BACKUP_COUNT", "3"))

    # Text of the single paragraph a document starts with when no seed is given.
    welcome_text: str = os.environ.get("BLOCKPAD_WELCOME_TEXT", "Start writing...")

    @property
    def log_path(self) -> Path:
        return self.data_dir / "blockpad.log"


settings = Settings()

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = "bday.toml"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    config_path: Path
    log_level: int


def _xdg_config_home() -> Path:
    value = os.getenv("XDG_CONFIG_HOME")
    if value is None or not value.strip():
        return Path.home() / ".config"
    return Path(value.strip()).expanduser()


def candidate_config_paths() -> list[Path]:
    """Search order for the birthday file; the first existing one wins."""
    return [
        Path.cwd() / CONFIG_FILE_NAME,
        _xdg_config_home() / CONFIG_FILE_NAME,
        Path.home() / f".{CONFIG_FILE_NAME}",
    ]


def find_config_path() -> Path:
    override = os.getenv("BDAY_CONFIG_PATH")
    if override is not None and override.strip():
        return Path(override.strip()).expanduser()

    for path in candidate_config_paths():
        if path.is_file():
            return path
    return _xdg_config_home() / CONFIG_FILE_NAME


def _parse_log_level(value: str) -> int:
    level = logging.getLevelName(value.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level in BDAY_LOG_LEVEL: {value}")
    return level


def load_settings(config_path: Path | None = None) -> Settings:
    return Settings(
        config_path=config_path if config_path is not None else find_config_path(),
        log_level=_parse_log_level(os.getenv("BDAY_LOG_LEVEL", DEFAULT_LOG_LEVEL)),
    )

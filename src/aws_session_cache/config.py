"""Configuration management for the AWS session credential cache."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

_config_logger = logging.getLogger(__name__)


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO", description="Python logging level name")
    file: str | None = Field(default=None, description="Optional log file path")


class KeyringSettings(BaseModel):
    backend: Literal["sqlite", "memory"] = Field(
        default="sqlite",
        description="Keyring backend: sqlite | memory",
    )
    sqlite_path: str = Field(default="./data/session_keyring.sqlite")
    sqlite_wal: bool = Field(default=True)


class AWSSettings(BaseModel):
    config_file: str | None = Field(
        default=None,
        description="Shared config file used to resolve profile names (AWS_CONFIG_FILE)",
    )


class Settings(BaseModel):
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    keyring: KeyringSettings = Field(default_factory=KeyringSettings)
    aws: AWSSettings = Field(default_factory=AWSSettings)


ENV_KEYS = {
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
    "keyring_backend": "SESSION_KEYRING_BACKEND",
    "keyring_path": "SESSION_KEYRING_PATH",
    "keyring_wal": "SESSION_KEYRING_WAL",
    "aws_config_file": "AWS_CONFIG_FILE",
}

_TRUE_VALUES = frozenset({"1", "true", "yes"})


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _resolve_path(path: str) -> str:
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return str(candidate.resolve())
    return str((_project_root() / candidate).resolve())


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv(dotenv_path=_project_root() / ".env")
    log_file_env = os.getenv(ENV_KEYS["log_file"])
    aws_config_env = os.getenv(ENV_KEYS["aws_config_file"], "").strip()

    settings_data: dict[str, object] = {
        "logging": {
            "level": os.getenv(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": _resolve_path(log_file_env) if log_file_env else None,
        },
        "keyring": {
            "backend": os.getenv(ENV_KEYS["keyring_backend"], KeyringSettings().backend)
            .strip()
            .lower(),
            "sqlite_path": _resolve_path(
                os.getenv(ENV_KEYS["keyring_path"], KeyringSettings().sqlite_path)
            ),
            "sqlite_wal": _env_bool(ENV_KEYS["keyring_wal"], KeyringSettings().sqlite_wal),
        },
        "aws": {
            "config_file": _resolve_path(aws_config_env) if aws_config_env else None,
        },
    }

    try:
        settings = Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc

    if settings.keyring.backend == "sqlite":
        Path(settings.keyring.sqlite_path).parent.mkdir(parents=True, exist_ok=True)

    _config_logger.debug(
        "Loaded settings: keyring backend=%s path=%s",
        settings.keyring.backend,
        settings.keyring.sqlite_path,
    )

    return settings

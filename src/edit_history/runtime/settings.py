"""Environment-driven settings for the history package."""

from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_PREFIX = "EDIT_HISTORY_"
DEFAULT_CAPACITY = 100
DEFAULT_LOGGER_NAME = "edit_history"
DEFAULT_BUFFER_SIZE = 2048

_TRUTHY = {"1", "true", "yes", "on"}
_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseModel):
    """Snapshot of the ``EDIT_HISTORY_*`` environment."""

    model_config = ConfigDict(frozen=True)

    default_capacity: int = DEFAULT_CAPACITY
    logger_name: str = Field(default=DEFAULT_LOGGER_NAME, min_length=1)
    log_level: str = "INFO"
    log_file: str = ""
    log_json: bool = False
    console: bool = True
    color: bool = True
    buffered: bool = False
    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, gt=0)

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> str:
        level = str(value or "INFO").strip().upper()
        if level == "WARN":
            level = "WARNING"
        return level if level in _LEVELS else "INFO"


def _env(
    name: str, environ: Mapping[str, str], default: Optional[str] = None
) -> Optional[str]:
    return environ.get(f"{ENV_PREFIX}{name}", default)


def _env_flag(name: str, environ: Mapping[str, str], default: bool) -> bool:
    raw = _env(name, environ)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def _env_int(name: str, environ: Mapping[str, str], default: int) -> int:
    raw = _env(name, environ)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from ``environ`` (``os.environ`` when omitted).

    Malformed numbers fall back to their defaults. Capacity is not range
    checked here; a non-positive value fails when a history is built with it.
    """

    source = os.environ if environ is None else environ
    buffer_size = _env_int("LOG_BUFFER_SIZE", source, DEFAULT_BUFFER_SIZE)
    values: Dict[str, Any] = {
        "default_capacity": _env_int("DEFAULT_CAPACITY", source, DEFAULT_CAPACITY),
        "logger_name": _env("LOGGER", source) or DEFAULT_LOGGER_NAME,
        "log_level": _env("LOG_LEVEL", source) or "INFO",
        "log_file": _env("LOG_FILE", source) or "",
        "log_json": _env_flag("LOG_JSON", source, False),
        "console": not _env_flag("DISABLE_CONSOLE", source, False),
        "color": not _env_flag("NO_COLOR", source, False),
        "buffered": _env_flag("LOG_BUFFERED", source, False),
        "buffer_size": buffer_size if buffer_size > 0 else DEFAULT_BUFFER_SIZE,
    }
    return Settings(**values)


__all__ = [
    "ENV_PREFIX",
    "DEFAULT_CAPACITY",
    "DEFAULT_LOGGER_NAME",
    "Settings",
    "load_settings",
]

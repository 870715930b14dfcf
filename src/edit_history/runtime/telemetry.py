"""Telemetry for the history package, built on the standard logging module.

``configure(...)`` -- apply settings or a named preset to the package logger
``get_logger(name)`` -- fetch (and cache) a logger under the package root
``record_event(name, ...)`` -- emit a structured event at a chosen level
``span(name, ...)`` -- time a block, logging its duration and any failure
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from logging.handlers import MemoryHandler
from typing import Any, Dict, Iterator, List, MutableMapping, Optional, Tuple

from .settings import Settings, load_settings

_LOGGER_CACHE: MutableMapping[str, logging.Logger] = {}
_ACTIVE_SETTINGS: Optional[Settings] = None
_ENV_SETTINGS: Optional[Settings] = None
_INSTALLED: List[Tuple[logging.Logger, logging.Handler]] = []

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
_COLORS = {
    logging.DEBUG: "\033[2m",
    logging.INFO: "\033[34m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
}
_RESET = "\033[0m"


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _format_pairs(data: Dict[str, Any]) -> str:
    return " ".join(f"{key}={_stringify(value)}" for key, value in data.items())


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        fields = getattr(record, "fields", None)
        if fields:
            payload.update(fields)
        return json.dumps(payload, default=str)


class _ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        color = _COLORS.get(record.levelno)
        return f"{color}{text}{_RESET}" if color else text


def _build_preset_settings(preset: str, base: Settings) -> Settings:
    key = preset.lower()
    if key == "development":
        update: Dict[str, Any] = {
            "log_level": "DEBUG",
            "console": True,
            "color": True,
            "log_json": False,
        }
    elif key == "production":
        update = {
            "log_level": "INFO",
            "console": False,
            "log_file": base.log_file or "edit_history.log",
            "buffered": True,
        }
    elif key in {"performance", "performance_analysis"}:
        update = {
            "log_level": "DEBUG",
            "console": False,
            "log_json": True,
            "log_file": base.log_file or "edit_history-performance.log",
            "buffered": True,
        }
    else:
        raise ValueError(f"Unknown preset '{preset}'.")
    return base.model_copy(update=update)


def _is_terminal(stream: Any) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _build_handlers(settings: Settings) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if settings.console:
        console = logging.StreamHandler()
        if settings.log_json:
            console.setFormatter(_JsonFormatter())
        elif settings.color and _is_terminal(console.stream):
            console.setFormatter(_ColorFormatter(_PLAIN_FORMAT))
        else:
            console.setFormatter(logging.Formatter(_PLAIN_FORMAT))
        handlers.append(console)
    if settings.log_file:
        target: logging.Handler = logging.FileHandler(settings.log_file, delay=True)
        target.setFormatter(
            _JsonFormatter() if settings.log_json else logging.Formatter(_PLAIN_FORMAT)
        )
        if settings.buffered:
            target = MemoryHandler(
                settings.buffer_size, flushLevel=logging.ERROR, target=target
            )
        handlers.append(target)
    return handlers


def _apply(settings: Settings) -> None:
    global _ACTIVE_SETTINGS
    for owner, handler in _INSTALLED:
        owner.removeHandler(handler)
        # MemoryHandler.close flushes into its target but leaves it open
        target = getattr(handler, "target", None)
        handler.close()
        if target is not None:
            target.close()
    _INSTALLED.clear()

    root = logging.getLogger(settings.logger_name)
    root.setLevel(_resolve_level(settings.log_level, fallback=logging.INFO))
    for handler in _build_handlers(settings):
        root.addHandler(handler)
        _INSTALLED.append((root, handler))

    _ACTIVE_SETTINGS = settings
    _LOGGER_CACHE.clear()


def configure(
    *, settings: Optional[Settings] = None, preset: Optional[str] = None
) -> Settings:
    """Reconfigure package logging and return the settings now in effect.

    Parameters
    ----------
    settings:
        Explicit settings to adopt; defaults to the ``EDIT_HISTORY_*``
        environment.
    preset:
        ``"development"``, ``"production"`` or ``"performance"``, layered on
        top of ``settings``.
    """

    base = settings if settings is not None else load_settings()
    if preset:
        base = _build_preset_settings(preset, base)
    _apply(base)
    return base


def active_settings() -> Settings:
    """Settings from the last ``configure`` call, else from the environment.

    Reading the environment installs nothing; handlers and the logger level
    are only touched by an explicit ``configure``.
    """

    global _ENV_SETTINGS
    if _ACTIVE_SETTINGS is not None:
        return _ACTIVE_SETTINGS
    if _ENV_SETTINGS is None:
        _ENV_SETTINGS = load_settings()
    return _ENV_SETTINGS


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a cached logger; bare names are nested under the package root."""

    root = active_settings().logger_name
    if not name or name == root:
        logger_name = root
    elif name.startswith(f"{root}."):
        logger_name = name
    else:
        logger_name = f"{root}.{name}"
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = logging.getLogger(logger_name)
    return _LOGGER_CACHE[logger_name]


def _resolve_level(level: Any, *, fallback: Optional[int] = None) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if isinstance(resolved, int):
        return resolved
    if fallback is not None:
        return fallback
    raise ValueError(f"Unsupported log level '{level}'.")


def record_event(
    name: str,
    *,
    level: str | int = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit ``event::<name>`` with ``data`` attached as key/value pairs."""

    numeric = _resolve_level(level)
    log = get_logger(logger_name)
    if not log.isEnabledFor(numeric):
        return
    payload = {"event": name, **(data or {})}
    log.log(
        numeric,
        "event::%s %s",
        name,
        _format_pairs(payload),
        extra={"fields": payload},
    )


@dataclass
class SpanHandle:
    """Handle yielded by ``span`` for late metadata."""

    logger: logging.Logger
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started) * 1000.0

    def _emit(
        self, level: int, message: str, extra: Optional[Dict[str, Any]] = None
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        if extra:
            payload.update({key: _stringify(val) for key, val in extra.items()})
        self.logger.log(
            level, "%s %s", message, _format_pairs(payload), extra={"fields": payload}
        )

    def finish(self) -> None:
        self._emit(logging.DEBUG, "span::end", {"elapsed_ms": f"{self.elapsed_ms():.3f}"})

    def fail(self, reason: str) -> None:
        self._emit(logging.ERROR, "span::fail", {"reason": reason})


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Time a block and log it at debug level when it completes.

    ``component=True`` reuses ``name`` as the component; a string names it.
    An exception escaping the block is logged through ``SpanHandle.fail``
    and re-raised.
    """

    log = get_logger(logger_name)
    component_name = None
    if component is True:
        component_name = name
    elif isinstance(component, str):
        component_name = component

    handle = SpanHandle(
        logger=log,
        span_name=name,
        component_name=component_name,
        metadata={key: _stringify(value) for key, value in (metadata or {}).items()},
    )
    try:
        yield handle
    except Exception as exc:
        handle.fail(str(exc))
        raise
    handle.finish()


__all__ = [
    "SpanHandle",
    "active_settings",
    "configure",
    "get_logger",
    "record_event",
    "span",
]

"""Structured logging utilities for the provider layer.

Rationale:
- One place configures JSON (or plain) logging for every adapter.
- Adapters obtain child loggers (``aikit.providers.openai``, ...)
  which propagate to the shared ``aikit`` base logger.

Normalized events:
``normalized_log_event`` wraps ``log_event`` and guarantees a canonical key set
across providers: ``structured`` (bool), ``phase`` (str), ``attempt``
(int|None), ``error_code`` (str|None), ``emitted`` (int|bool|None) and
``tokens`` (mapping|None). The streaming facade emits ``stream.start``,
``stream.end``, ``stream.error`` and, for the open phase, ``retry.attempt``.

Environment:
``AIKIT_LOG_LEVEL`` sets the base level (DEBUG, INFO, WARNING, ERROR).
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Mapping, Optional

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "aikit"
_BASE_LOGGER_ATTR = "_aikit_logger_initialized"
_CONSOLE_HANDLER_ATTR = "_aikit_console_handler"
_FILE_HANDLER_ATTR = "_aikit_file_handler"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Parse a logging level string into an integer constant.

    Accepts common names (DEBUG, INFO, WARN/WARNING, ERROR, CRITICAL)
    case-insensitively. Falls back to ``default`` on unknown values.
    """
    if not value:
        return default
    mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return mapping.get(value.strip().upper(), default)


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _ensure_base_logger(json_mode: bool, level: int) -> logging.Logger:
    """Initialize (once) and return the shared ``aikit`` logger."""
    logger = logging.getLogger(BASE_LOGGER_NAME)
    desired_level = _parse_level(os.getenv("AIKIT_LOG_LEVEL"), default=level)
    if getattr(logger, _BASE_LOGGER_ATTR, False):
        if logger.level != desired_level:
            logger.setLevel(desired_level)
        for handler in logger.handlers:
            if getattr(handler, _CONSOLE_HANDLER_ATTR, False):
                handler.setLevel(desired_level)
        return logger

    logger.setLevel(desired_level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(desired_level)
    handler.setFormatter(_formatter(json_mode))
    setattr(handler, _CONSOLE_HANDLER_ATTR, True)
    logger.handlers[:] = [handler]
    logger.propagate = False
    setattr(logger, _BASE_LOGGER_ATTR, True)
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return a logger under the shared ``aikit`` hierarchy.

    Child loggers carry no handlers of their own; records propagate to the
    base logger's console (and optional file) handlers.
    """
    base_logger = _ensure_base_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return base_logger
    if not name.startswith(f"{BASE_LOGGER_NAME}."):
        name = f"{BASE_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared ``aikit`` logger at runtime.

    Parameters
    ----------
    level: int | str | None
        Desired logging level (numeric or name). ``None`` keeps the current one.
    file_path: Optional[str]
        When provided, attach (or reuse) a rotating file handler writing to
        this path. When ``None``, any previously attached managed file handler
        is removed.
    json_mode: bool
        JSON formatter (default) or plain text for the file handler.

    Notes
    -----
    Only handlers created by this module are touched; user-attached handlers
    are preserved.
    """
    logger = _ensure_base_logger(json_mode=json_mode, level=logging.INFO)
    if level is not None:
        logger.setLevel(_parse_level(level, default=logger.level) if isinstance(level, str) else level)
        for handler in logger.handlers:
            handler.setLevel(logger.level)

    managed = [h for h in logger.handlers if getattr(h, _FILE_HANDLER_ATTR, False)]
    if file_path is None:
        for handler in managed:
            logger.removeHandler(handler)
            with contextlib.suppress(Exception):
                handler.close()
        return logger

    abs_path = os.path.abspath(os.path.expanduser(file_path))
    os.makedirs(os.path.dirname(abs_path), exist_ok=True)
    existing: Optional[logging.FileHandler] = None
    for handler in managed:
        if isinstance(handler, logging.FileHandler) and getattr(handler, "baseFilename", None) == abs_path:
            existing = handler
        else:
            logger.removeHandler(handler)
            with contextlib.suppress(Exception):
                handler.close()

    if existing is None:
        # 10MB x 5 backups keeps long-running services bounded.
        existing = RotatingFileHandler(abs_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
        setattr(existing, _FILE_HANDLER_ATTR, True)
        logger.addHandler(existing)
    existing.setFormatter(_formatter(json_mode))
    existing.setLevel(logger.level)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    keep_none: bool = False,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Emit a single-line JSON structured log event.

    Keys whose value is ``None`` are dropped unless ``keep_none`` is set, in
    which case they are encoded as JSON ``null``.
    """
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    if keep_none:
        payload.update(fields)
    else:
        payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = (
    "structured",
    "phase",
    "attempt",
    "error_code",
    "emitted",
    "tokens",
)


def _coerce_tokens(tokens: Any) -> Any:
    """Coerce token usage info into a stable JSON-friendly form."""
    if tokens is None:
        return None
    if hasattr(tokens, "to_dict"):
        return tokens.to_dict()
    if isinstance(tokens, Mapping):
        return dict(tokens.items())
    return {"value": repr(tokens)}


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: Any = None,
    tokens: Any = None,
    structured: bool = True,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Emit a normalized structured log event with the required key set.

    ``error_code`` is omitted when ``None`` (meaning "no error"); every other
    normalized key is always present. ``extra_fields`` never clobber the
    normalized values.
    """
    base_fields: Dict[str, Any] = {
        "structured": structured,
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
        "tokens": _coerce_tokens(tokens),
    }
    if error_code is not None:
        base_fields["error_code"] = error_code
    for key, value in extra_fields.items():
        if value is None or base_fields.get(key) is not None:
            continue
        base_fields[key] = value
    log_event(logger, event, ctx, keep_none=True, level=level, **base_fields)


__all__ = [
    "BASE_LOGGER_NAME",
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]

"""Centralized logging helpers for foodinflation.

Every module gets its logger through ``get_logger`` and the CLI calls
``configure_logging`` once, so format and verbosity are adjusted in one
place.
"""

from __future__ import annotations

import contextvars
import functools
import json
import logging
import os
import sys
import time
import uuid
from typing import Optional


_STD_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
_CONSOLE_HANDLER = "foodinflation_console"


def get_logger(
    name: str = "foodinflation",
    level: Optional[int] = None,
) -> logging.Logger:
    """Return a logger under the ``foodinflation`` namespace."""
    if name != "foodinflation" and not name.startswith("foodinflation."):
        name = f"foodinflation.{name}"
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger


# Correlation ID support for tracing one CLI invocation across modules
_cid_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "foodinflation_correlation_id", default=None
)


def set_correlation_id(cid: str | None = None) -> str:
    """Set or create and set a correlation id for the current context.

    Returns the correlation id string.
    """
    if cid is None:
        cid = uuid.uuid4().hex
    _cid_var.set(cid)
    return cid


def get_correlation_id() -> str | None:
    return _cid_var.get()


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter that includes correlation id when available."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        cid = get_correlation_id()
        if cid:
            payload["correlation_id"] = cid
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def log_call(level: int = logging.INFO):
    """Decorator that logs function entry, duration and exit.

    Usage:
        @log_call(logging.DEBUG)
        def foo(...):
            ...
    """

    def _decorator(func):
        @functools.wraps(func)
        def _wrapper(*args, **kwargs):
            logger = logging.getLogger(func.__module__)
            start = time.perf_counter()
            logger.debug(
                "Entering %s; args=%s kwargs=%s",
                func.__qualname__,
                args[1:] if args and hasattr(args[0], func.__name__) else args,
                kwargs,
            )
            try:
                result = func(*args, **kwargs)
            except Exception:
                duration = (time.perf_counter() - start) * 1000.0
                logger.debug(
                    "Exception in %s after %.2fms",
                    func.__qualname__,
                    duration,
                    exc_info=True,
                )
                raise
            duration = (time.perf_counter() - start) * 1000.0
            logger.log(
                level,
                "Exited %s; duration_ms=%.2f; return=%s",
                func.__qualname__,
                duration,
                repr(result)[:100],
            )
            return result

        return _wrapper

    return _decorator


def _resolve_mode(env: Optional[str]) -> str:
    chosen = env or os.getenv("FOODINFLATION_LOG_FORMAT", "auto")
    chosen = chosen.lower()
    if chosen in ("json", "human"):
        return chosen
    # auto: prefer human when interactive
    try:
        return "human" if sys.stderr.isatty() else "json"
    except (AttributeError, ValueError):
        return "json"


def configure_logging(env: Optional[str] = "auto", level: int = logging.INFO):
    """Configure the package logger.

    env: 'auto' (default) | 'json' | 'human'
    - 'auto' chooses human-readable when stderr is a TTY, otherwise JSON.
    - 'json' forces JSON output.
    - 'human' forces a readable formatter.

    Calling it again swaps the formatter and level of the existing handler.
    Returns the package logger.
    """
    if env == "auto":
        env = None
    mode = _resolve_mode(env)

    logger = logging.getLogger("foodinflation")
    logger.setLevel(level)

    handler = next(
        (h for h in logger.handlers if getattr(h, "name", None) == _CONSOLE_HANDLER),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler()
        handler.name = _CONSOLE_HANDLER
        logger.addHandler(handler)

    if mode == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_STD_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    return logger

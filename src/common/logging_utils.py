"""Centralized logging helpers.

Provides one place to configure the root logger from the environment and a
couple of small helpers for structured debug records (``extra=`` payloads and
timing).
"""

from __future__ import annotations

import logging
import os
import sys
import time
from typing import Any, Dict, Optional

from constants import Constants

_CONTEXT_KEYS = (
    "event",
    "component",
    "action",
    "target",
    "outcome",
    "count",
    "duration_ms",
    "identifier",
    "version",
    "profile",
    "path",
    "reason",
)

_HANDLER_MARKER = "_tfmkit_handler"


def configure_logging() -> None:
    """Configure the root logger from environment variables.

    ``TFMKIT_LOG_LEVEL`` selects the level (default INFO) and ``TFMKIT_LOG_FILE``
    adds a file handler. Calling this more than once does not stack handlers.
    """
    level_name = os.environ.get(Constants.ENV_LOG_LEVEL, Constants.DEFAULT_LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(Constants.LOG_FORMAT)
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    setattr(stream_handler, _HANDLER_MARKER, True)
    root.addHandler(stream_handler)

    log_file = os.environ.get(Constants.ENV_LOG_FILE)
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        setattr(file_handler, _HANDLER_MARKER, True)
        root.addHandler(file_handler)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` payload from known structured fields.

    Unknown keys and None values are dropped so records stay uniform.

    Returns:
        dict: Mapping suitable for the ``extra`` argument of logging calls.
    """
    return {k: v for k, v in fields.items() if k in _CONTEXT_KEYS and v is not None}


class Timer:
    """Context manager measuring wall-clock duration in milliseconds."""

    def __init__(self) -> None:
        self._start: Optional[float] = None
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Elapsed milliseconds; measured up to now while still running."""
        if self._start is None:
            return 0.0
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000.0, 3)

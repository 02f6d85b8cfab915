"""Centralized logging helpers.

Every module logs through ``logging.getLogger(__name__)``; this module owns
the root handler setup and the helpers used to attach structured context to
DEBUG events without leaking credentials into log output.
"""
from __future__ import annotations

import logging
import os
import re
import sys
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_KEYS = ("token", "password", "secret", "authorization")
_TOKEN_PATTERN = re.compile(r"(gh[pousr]_[A-Za-z0-9]{16,}|glpat-[A-Za-z0-9_\-]{16,})")


def configure_logging() -> None:
    """Install a single stderr handler on the root logger.

    The level comes from the DEPSYNC_LOG_LEVEL environment variable and
    defaults to INFO. Calling this more than once does not stack handlers.
    """
    level_name = os.environ.get(Constants.ENV_LOG_LEVEL, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_depsync_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    handler._depsync_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def redact(value: Any) -> str:
    """Mask anything that looks like an access token."""
    return _TOKEN_PATTERN.sub("***", str(value))


def safe_url(url: str) -> str:
    """Strip userinfo and query string from a URL before logging it."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return redact(url)
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, "", ""))


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured log record.

    ``None`` values are dropped and values under sensitive keys are masked.
    """
    context: Dict[str, Any] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if any(marker in key.lower() for marker in _SENSITIVE_KEYS):
            context[key] = "***"
        else:
            context[key] = value
    return {"context": context}


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

    def duration_ms(self) -> int:
        """Elapsed milliseconds; measured up to now while still running."""
        if self._start is None:
            return 0
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)

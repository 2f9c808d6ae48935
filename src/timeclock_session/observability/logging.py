"""Shared logging utilities for consistent client observability.

Usage example:
    from timeclock_session.observability.logging import get_logger, set_log_level

    logger = get_logger("timeclock_session.pipeline")
    logger.info("401 from %s; refreshing access credential", path)

    set_log_level("debug")  # what `timeclock-session --log-level debug` does

Loggers by concern:
- `timeclock_session.pipeline`: 401 handling and forced session end (INFO/WARNING)
- `timeclock_session.refresh`: refresh outcomes; waiting followers at DEBUG
- `timeclock_session.auth`: sign-in, failed logout, failed session restore
- `timeclock_session.infrastructure.*`: outgoing requests (DEBUG), login redirects

Credential and anti-forgery values must never be passed to these loggers; log
paths, statuses and `ApiError.message` only.
"""

from __future__ import annotations

import logging
import time

ROOT_LOGGER_NAME = "timeclock_session"

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class UnknownLogLevelError(ValueError):
    """Raised when a log level name is not recognised."""

    def __init__(self, level: str) -> None:
        super().__init__(f"Unknown log level: {level!r} (expected one of {sorted(_LEVELS)}).")


def get_logger(name: str) -> logging.Logger:
    """Return a standard logger configured for UTC timestamps.

    Args:
        name: Logger name (use a stable module-qualified name).

    Returns:
        A logger with a single stream handler and a consistent UTC format.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(fmt=_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)
        formatter.converter = time.gmtime
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
    return logger


def set_log_level(level: str) -> None:
    """Apply a named level to every package logger created so far."""
    resolved = _LEVELS.get(level.strip().lower())
    if resolved is None:
        raise UnknownLogLevelError(level)
    prefix = f"{ROOT_LOGGER_NAME}."
    for name in list(logging.root.manager.loggerDict):
        if name == ROOT_LOGGER_NAME or name.startswith(prefix):
            logging.getLogger(name).setLevel(resolved)

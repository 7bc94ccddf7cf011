"""Logging setup for the ``dirauth`` logger.

The library itself only calls ``logging.getLogger(__name__)`` (or the logger
a caller injects). Hosts that have no logging of their own can call
:func:`setup_logging`:

- Console handler always (stdout of the host process).
- File handler only when ``log_dir`` is given: TimedRotatingFileHandler,
  rotation at midnight, ``retention_days`` files kept.
- Invalid level names fall back to INFO.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler

from .env_settings import DirectorySettings, get_settings

_LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_LOGGER_NAME = "dirauth"

# Track installed handlers so reconfiguration removes the old ones.
_file_handler: logging.Handler | None = None
_console_handler: logging.Handler | None = None


def setup_logging(
    level: str = "INFO",
    log_dir: str | None = None,
    retention_days: int = 30,
) -> logging.Logger:
    global _file_handler, _console_handler

    level_str = (level or "INFO").strip().upper()
    if level_str not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        level_str = "INFO"
    log_level = getattr(logging, level_str, logging.INFO)
    retention_days = max(1, min(365, int(retention_days or 30)))

    logger = logging.getLogger(_LOGGER_NAME)

    if _file_handler is not None:
        logger.removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None
    if _console_handler is not None:
        logger.removeHandler(_console_handler)
        _console_handler = None

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    logger.addHandler(ch)
    _console_handler = ch

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        fh = TimedRotatingFileHandler(
            os.path.join(log_dir, "dirauth.log"),
            when="midnight",
            interval=1,
            backupCount=retention_days,
            encoding="utf-8",
            utc=True,
        )
        fh.suffix = "%Y-%m-%d"
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        logger.addHandler(fh)
        _file_handler = fh

    logger.setLevel(log_level)
    logger.info("Logging configured: level=%s, retention=%d days", level_str, retention_days)
    return logger


def setup_logging_from_settings(st: DirectorySettings | None = None) -> logging.Logger:
    """Configure logging from ``DIRAUTH_LOG_LEVEL`` / ``DIRAUTH_LOG_DIR``."""
    st = st if st is not None else get_settings()
    return setup_logging(level=st.log_level, log_dir=st.log_dir or None)

"""Logging configuration for issueflow.

Every command writes a rotating log file so a failed run can be inspected
after the fact; console logging is only switched on for ``--verbose`` or
when ``DEBUG`` is set in the environment.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "issueflow"
LOG_DIR_ENV_VAR = "ISSUEFLOW_LOG_DIR"
LOG_LEVEL_ENV_VAR = "ISSUEFLOW_LOG_LEVEL"

DEFAULT_LOG_DIR = ".claude/logs"
DEFAULT_LOG_FILE = "issueflow.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_REDACTIONS = [
    (re.compile(r"gh[po]_[a-zA-Z0-9]{36}"), "[GITHUB_TOKEN]"),
    (re.compile(r"github_pat_[a-zA-Z0-9_]{82}"), "[GITHUB_TOKEN]"),
    (re.compile(r"Bearer [a-zA-Z0-9._-]+"), "Bearer [REDACTED]"),
    (re.compile(r"token [a-zA-Z0-9._-]{20,}"), "token [REDACTED]"),
]


def debug_enabled() -> bool:
    """Return True when the ``DEBUG`` environment variable is set."""
    return bool(os.environ.get("DEBUG"))


def _resolve_level(level: str | None) -> int:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR) or ("DEBUG" if debug_enabled() else "INFO")
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool = False,
) -> logging.Logger:
    """Configure the ``issueflow`` logger; safe to call more than once.

    Args:
        log_dir: Directory for log files. Defaults to ``ISSUEFLOW_LOG_DIR``,
                 then ``.claude/logs``.
        log_file: Log file name.
        max_bytes: Size at which the file is rotated.
        backup_count: Number of rotated files to keep.
        level: Level name. Defaults to ``ISSUEFLOW_LOG_LEVEL``, then DEBUG
               when ``DEBUG`` is set, then INFO.
        console: Also log to stderr.

    Returns:
        The root issueflow logger.
    """
    directory = Path(log_dir or os.environ.get(LOG_DIR_ENV_VAR) or DEFAULT_LOG_DIR)
    directory.mkdir(parents=True, exist_ok=True)
    log_level = _resolve_level(level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            directory / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    ]
    if console or debug_enabled():
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug(
        "Logging to %s at %s", directory / log_file, logging.getLevelName(log_level)
    )
    return logger


def truncate_output(output: str, max_length: int = 2000) -> str:
    """Cap a long API payload before it is logged."""
    if len(output) <= max_length:
        return output
    hidden = len(output) - max_length
    return f"{output[:max_length]}\n... [truncated, {hidden} more chars]"


def sanitize_for_log(text: str) -> str:
    """Redact GitHub tokens and auth headers."""
    for pattern, replacement in _REDACTIONS:
        text = pattern.sub(replacement, text)
    return text

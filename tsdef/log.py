"""Logging setup for tsdef.

Module loggers come from `get_logger(__name__)`. The CLI calls
`setup_logging`, which installs one colored handler on stderr so that stdout
carries nothing but declarations.
"""

from __future__ import annotations

import logging
import os
import sys

from yachalk import chalk

LOG_FORMAT = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT = "[%(levelname)s] [%(filename)s:%(lineno)d] [%(funcName)s] %(message)s"

ENV_VAR = "TSDEF_LOG_LEVEL"

_LEVEL_NAMES: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "NOTSET": logging.NOTSET,
}


class ChalkFormatter(logging.Formatter):
    """Formatter that colors records by severity."""

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelno
        message = super().format(record)
        if level >= logging.CRITICAL:
            return chalk.red_bright(message)
        if level >= logging.ERROR:
            return chalk.red(message)
        if level >= logging.WARNING:
            return chalk.yellow(message)
        if level >= logging.INFO:
            return chalk.green(message)
        return chalk.gray(message)


def resolve_env_log_level() -> int | None:
    """Return the level named by TSDEF_LOG_LEVEL, or None if unset/invalid.

    Accepts level names ("DEBUG", "warn") and numbers ("10").
    """
    val = os.environ.get(ENV_VAR)
    if not val:
        return None
    v = val.strip().upper()
    if v.isdigit():
        return int(v)
    return _LEVEL_NAMES.get(v)


def setup_logging(level: int | None = None) -> None:
    """Configure the root logger. Defaults to the environment, then WARNING."""
    if level is None:
        level = resolve_env_log_level() or logging.WARNING
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ChalkFormatter(LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT))
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a tsdef module."""
    return logging.getLogger(name)

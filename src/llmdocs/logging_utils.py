#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Logging setup for the llmdocs command-line entry point.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
attached here, to the ``llmdocs`` package logger, so that embedding
applications keep full control over the root logger.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER_NAME = "llmdocs"

_PLAIN_FORMAT = "%(levelname)s: %(message)s"
_TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"


def resolve_log_level(log_level: int | str | None, default: int = logging.WARNING) -> int:
    """Translate a numeric or named level into a ``logging`` constant.

    Unknown names fall back to ``default`` rather than raising, since the value
    usually comes from an environment variable.
    """
    if log_level is None:
        return default
    if isinstance(log_level, int):
        return log_level
    resolved = logging.getLevelName(str(log_level).strip().upper())
    return resolved if isinstance(resolved, int) else default


def configure_logging(
    log_level: int | str | None,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Attach stderr (and optionally file) handlers to the package logger.

    Parameters
    ----------
    log_level : int | str | None
        Numeric logging level or level name (e.g., "DEBUG").
    log_file : str, optional
        Path to a log file that receives a copy of every record.
    trace_mode : bool, default False
        Include timestamps and logger names in each record.

    Returns
    -------
    logging.Logger
        The configured ``llmdocs`` logger.

    """
    level = resolve_log_level(log_level)
    formatter = logging.Formatter(
        _TRACE_FORMAT if trace_mode else _PLAIN_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S" if trace_mode else None,
    )

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not create log file %s: %s", log_file, exc)
        else:
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
            logger.debug("Logging to file: %s", log_file)

    return logger

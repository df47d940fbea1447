"""Diagnostic logging setup.

Log records never reach the terminal: the TUI owns the screen. With ``DEBUG``
set they are written to a file, otherwise they are dropped.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

PACKAGE_LOGGER = "lazyvault"
ENV_DEBUG = "DEBUG"
ENV_LOG_FILE = "LAZYVAULT_LOG_FILE"
DEFAULT_LOG_FILE = Path("log")
LOG_FORMAT = "time=%(asctime)s level=%(levelname)s logger=%(name)s msg=%(message)r"


def configure_logging(environ: Mapping[str, str] | None = None) -> Path | None:
    """Route package logs to a debug file or silence them.

    Returns the log file path when file logging was enabled.
    """
    env = os.environ if environ is None else environ
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    if not env.get(ENV_DEBUG):
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.WARNING)
        return None

    log_path = Path(env.get(ENV_LOG_FILE) or DEFAULT_LOG_FILE)
    handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    return log_path


__all__ = ["DEFAULT_LOG_FILE", "ENV_DEBUG", "ENV_LOG_FILE", "PACKAGE_LOGGER", "configure_logging"]

"""Console and optional file logging for the ``deepfield`` logger tree."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

PACKAGE_LOGGER = "deepfield"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)


def setup_logging(level: int = logging.INFO, log_file: str | Path | None = None) -> logging.Logger:
    """Route every ``deepfield.*`` logger to stdout, and to ``log_file`` if given.

    Safe to call again (e.g. when the viewer restarts in-process): handlers
    from the previous call are closed and replaced rather than stacked.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    _attach(logger, logging.StreamHandler(sys.stdout), level)
    if log_file:
        _attach(logger, logging.FileHandler(log_file, mode="w", encoding="utf-8"), level)

    logger.debug("Logging to stdout%s", f" and {log_file}" if log_file else "")
    return logger

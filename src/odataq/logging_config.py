"""Logging setup shared by the query assembler and the odataq CLI."""

from __future__ import annotations

import logging
import sys


LOGGER_NAME = "odataq"
LOG_FORMAT = "%(message)s"


def get_logger() -> logging.Logger:
    """Return the package logger used for query and config records."""
    return logging.getLogger(LOGGER_NAME)


def _stdout_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def configure_logging(verbose: bool) -> None:
    """Route INFO records to stdout when verbose, keep only warnings otherwise.

    Handlers are rebuilt on every call, so repeated in-process invocations
    write to the current `sys.stdout`.

    Args:
        verbose: Whether to log built queries and applied defaults
    """
    logger = get_logger()
    logger.propagate = False
    logger.handlers.clear()

    if not verbose:
        logger.setLevel(logging.WARNING)
        return

    logger.setLevel(logging.INFO)
    logger.addHandler(_stdout_handler())

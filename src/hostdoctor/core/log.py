"""Console logging for the CLI."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

LOGGER_NAME = "hostdoctor"


def get_logger() -> logging.Logger:
    """Return the package root logger."""
    return logging.getLogger(LOGGER_NAME)


@contextmanager
def console_log_context(verbose: bool = False) -> Generator[logging.Logger, None, None]:
    """
    Attach a stderr handler to the package logger for the duration of the context.
    Warnings and above by default; DEBUG with verbose. Format: [LEVEL] name: message.
    """
    logger = get_logger()
    level = logging.DEBUG if verbose else logging.WARNING
    previous = logger.level
    logger.setLevel(level)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)

    try:
        yield logger
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous)

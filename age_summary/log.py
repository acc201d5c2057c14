"""Package-wide logging helpers.

A NullHandler sits on the ``age_summary`` logger so importing the package
never prints on its own; the CLI calls :func:`configure_logging` to attach a
stream handler.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

PACKAGE_LOGGER_NAME = "age_summary"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name or PACKAGE_LOGGER_NAME)


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: IO[str] | None = None,
    fmt: str | None = None,
) -> logging.Logger:
    """Attach a single StreamHandler to the package logger and set its level.

    Calling this twice does not duplicate output: an existing stream handler
    is reused (and pointed at ``stream`` if its own stream was closed).
    """
    logger = get_logger()
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)

    if stream is None:
        stream = sys.stderr

    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            if getattr(handler.stream, "closed", False):
                handler.setStream(stream)
            return logger

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt=fmt or DEFAULT_FORMAT))
    logger.addHandler(handler)
    return logger

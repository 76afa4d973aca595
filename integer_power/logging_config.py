"""Logging setup for the service and the command-line search.

Modules log through ``logging.getLogger(__name__)``; nothing is printed
until ``setup_logging`` attaches a handler to the package logger.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PACKAGE_LOGGER = "integer_power"


def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """
    Configure the ``integer_power`` logger with a single stream handler.

    Calling it again only updates the level, so a server restart in the
    same process does not stack handlers.

    :param level: Logging level (int or name, e.g. ``"DEBUG"``)
    :return: The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if not any(getattr(h, "_integer_power", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handler._integer_power = True
        logger.addHandler(handler)

    return logger

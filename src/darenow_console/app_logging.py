"""Logging setup for the console package."""

import logging

PACKAGE_LOGGER = "darenow_console"
LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Send package logs to one stream handler and return the package logger.

    ``level`` may be numeric or a level name such as ``"debug"``. Calling
    again only changes the level.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger

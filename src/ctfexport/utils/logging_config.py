"""Logging setup for the ctfexport command line."""

from __future__ import annotations

import logging

LOGGER_NAME = "ctfexport"
LOG_FORMAT = "%(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbosity: int = 0, *, quiet: bool = False) -> logging.Logger:
    """Configure console logging for the CLI.

    Args:
        verbosity: 0 logs progress at INFO, 1 or more enables DEBUG output.
        quiet: Only log warnings and errors.

    Returns:
        The configured package logger.
    """
    if quiet:
        level = logging.WARNING
    elif verbosity >= 1:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(level)
    fmt = DEBUG_LOG_FORMAT if level == logging.DEBUG else LOG_FORMAT
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    # Keep httpx request lines out of normal output.
    logging.getLogger("httpx").setLevel(logging.DEBUG if level == logging.DEBUG else logging.WARNING)
    return logger

"""Logging setup for the URL shortener."""

import logging
import sys
from typing import Optional


LOGGER_NAME = "shorturl_app"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach a stdout handler (and optionally a file handler) to the package logger.

    Modules log through ``logging.getLogger(__name__)``, so this covers the
    whole app. Calling it again replaces the handlers instead of stacking them.
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger

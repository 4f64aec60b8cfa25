"""Logging setup for the bridge core.

The package only creates loggers; the process embedding it calls
:func:`configure_logging` once at startup.
"""
from __future__ import annotations

import logging

from .config import Settings, settings as default_settings

PACKAGE_LOGGER = "videobridge"


def configure_logging(settings: Settings | None = None) -> logging.Logger:
    """Apply the configured level and format to the package logger."""

    settings = settings or default_settings
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(settings.log_level)

    if not logger.handlers:
        logger.addHandler(logging.StreamHandler())
    formatter = logging.Formatter(settings.log_format)
    for handler in logger.handlers:
        handler.setFormatter(formatter)
    return logger

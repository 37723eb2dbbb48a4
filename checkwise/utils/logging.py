"""
Logging configuration for the checkwise package.

Every module logs through a child of the ``checkwise`` logger, which owns the
only handler. Output goes to stdout so it shows up in the workflow log.
"""

import logging
import sys

from ..config import get_settings

PACKAGE_LOGGER = "checkwise"


def setup_logging(level: str | None = None, format_string: str | None = None) -> logging.Logger:
    """
    Configure the package logger

    Calling it again replaces the handler, so the level or format can be
    changed at runtime.

    Args:
        level: Log level name, defaults to ``LOG_LEVEL``
        format_string: Log format, defaults to ``LOG_FORMAT``

    Returns:
        The configured ``checkwise`` logger
    """
    settings = get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(log_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(format_string or settings.log_format))
    logger.addHandler(console_handler)

    # The workflow log is the only sink
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger below the package logger, configuring it on first use

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        Logger instance
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not package_logger.handlers:
        setup_logging()

    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


class LoggerMixin:
    """Mixin class to add logging capability to other classes"""

    @property
    def logger(self) -> logging.Logger:
        """Get logger for this class"""
        return get_logger(f"{self.__class__.__module__}.{self.__class__.__name__}")

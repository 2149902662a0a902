"""
crawl_hooks/utils/logger.py

Logger factory for crawl-hooks. All package loggers hang off the
"crawl_hooks" logger, which is configured once from Config.
"""

import logging

from crawl_hooks.config import Config

PACKAGE_LOGGER_NAME = "crawl_hooks"

_configured = False


def _configure_package_logger() -> None:
    """Attach a stream handler to the package logger (only once)."""
    global _configured
    if _configured:
        return

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(Config.LOG_FORMAT, datefmt=Config.LOG_DATE_FORMAT))
        package_logger.addHandler(handler)
    package_logger.setLevel(Config.LOG_LEVEL)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger configured with the package defaults.
    Args:
        name: Logger name, usually __name__.
    Returns:
        logging.Logger: The configured logger.
    """
    _configure_package_logger()
    return logging.getLogger(name)

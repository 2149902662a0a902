"""
tests/unit/utils/test_config.py

Tests for Config and the package logger.
"""

import logging

from crawl_hooks.config import Config
from crawl_hooks.utils.logger import PACKAGE_LOGGER_NAME, get_logger


class TestConfig:
    """
    Tests for Config.
    """

    def test_as_dict(self) -> None:
        values = Config.as_dict()

        assert set(values) >= {
            "LOG_LEVEL",
            "LOG_FORMAT",
            "LOG_DATE_FORMAT",
            "TIMER_SPEEDUP_FACTOR",
            "OUTER_HTML_SNIPPET_LENGTH",
        }
        assert values["LOG_LEVEL"] == values["LOG_LEVEL"].upper()

    def test_types(self) -> None:
        assert isinstance(Config.TIMER_SPEEDUP_FACTOR, float)
        assert 0 < Config.TIMER_SPEEDUP_FACTOR < 1
        assert isinstance(Config.OUTER_HTML_SNIPPET_LENGTH, int)


class TestGetLogger:
    """
    Tests for get_logger.
    """

    def test_package_logger_configured_once(self) -> None:
        logger = get_logger("crawl_hooks.some.module")
        get_logger("crawl_hooks.other")

        package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
        assert logger.name == "crawl_hooks.some.module"
        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.getLevelName(Config.LOG_LEVEL)

"""
crawl_hooks/config.py

Centralized environment variable configuration.
"""

import os
from typing import Any

from dotenv import load_dotenv

load_dotenv()


class Config():
    """
    Centralized configuration for environment variables.
    """

    # Logging
    LOG_LEVEL: str = os.getenv("CRAWL_HOOKS_LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv(
        "CRAWL_HOOKS_LOG_FORMAT",
        "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s",
    )
    LOG_DATE_FORMAT: str = os.getenv("CRAWL_HOOKS_LOG_DATE_FORMAT", "%Y-%m-%d %H:%M:%S")

    # Instrumentation
    TIMER_SPEEDUP_FACTOR: float = float(os.getenv("CRAWL_HOOKS_TIMER_SPEEDUP_FACTOR", "0.1"))
    OUTER_HTML_SNIPPET_LENGTH: int = int(os.getenv("CRAWL_HOOKS_OUTER_HTML_SNIPPET_LENGTH", "100"))

    @classmethod
    def as_dict(cls) -> dict[str, Any]:
        """
        Return a dictionary of all UPPERCASE class attributes and their values.
        Return:
            dict[str, Any]: A dictionary of all UPPERCASE class attributes and their values.
        """
        return {
            key: getattr(cls, key)
            for key in dir(cls)
            if key.isupper()
        }

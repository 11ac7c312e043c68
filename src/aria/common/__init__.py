"""Common utilities for the Aria assistant."""

from aria.common.logging import get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
]

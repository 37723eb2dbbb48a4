"""
Utility functions and helpers
"""

from .globs import glob_to_regex, match_globs
from .logging import LoggerMixin, get_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "LoggerMixin",
    "glob_to_regex",
    "match_globs",
]

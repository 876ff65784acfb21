"""Utility module initialization."""

from .logging import get_logger, setup_logging
from .paths import ensure_directory, format_size
from .timeutil import is_listing_time, parse_listing_time

__all__ = [
    # logging
    "get_logger",
    "setup_logging",
    # paths
    "ensure_directory",
    "format_size",
    # timeutil
    "is_listing_time",
    "parse_listing_time",
]

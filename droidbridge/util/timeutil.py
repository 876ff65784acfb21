"""Utility functions for time operations."""

import re
from datetime import datetime
from typing import Optional

# Layouts seen in `ls -l` output across toybox, busybox and vendor builds,
# tried in order.
LISTING_TIME_FORMATS = [
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S.%f %z",
    "%b %d %Y",
    "%d %b %Y",
]

# Layouts without a year; the current year is assumed.
YEARLESS_LISTING_TIME_FORMATS = [
    "%b %d %H:%M",
    "%d %b %H:%M",
]

# toybox --full-time prints nanoseconds; strptime takes at most microseconds.
FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def parse_listing_time(text: str) -> Optional[datetime]:
    """Parse a modification time taken from a directory listing.

    Returns None when the text matches none of the known layouts.
    """
    text = " ".join((text or "").split())
    if not text:
        return None
    text = FRACTION_RE.sub(r"\1", text)

    for fmt in LISTING_TIME_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    year = datetime.now().year
    for fmt in YEARLESS_LISTING_TIME_FORMATS:
        try:
            return datetime.strptime(f"{year} {text}", f"%Y {fmt}")
        except ValueError:
            continue

    return None


def is_listing_time(text: str) -> bool:
    return parse_listing_time(text) is not None


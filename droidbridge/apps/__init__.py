"""App extraction and label fetching."""

from .extract import AppExtractor
from .labels import LabelFetcher

__all__ = [
    "AppExtractor",
    "LabelFetcher",
]

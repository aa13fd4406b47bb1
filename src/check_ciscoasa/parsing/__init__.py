"""Transcript parsing for check_ciscoasa."""

from .extractor import MetricExtractor
from .patterns import CATEGORY_PATTERNS, field_names

__all__ = [
    "CATEGORY_PATTERNS",
    "MetricExtractor",
    "field_names",
]

"""Data models for check_ciscoasa."""

from .enums import CheckCommand, MetricCategory, Severity
from .result import CheckResult, Finding, MetricRecord, PerfData

__all__ = [
    "CheckCommand",
    "CheckResult",
    "Finding",
    "MetricCategory",
    "MetricRecord",
    "PerfData",
    "Severity",
]

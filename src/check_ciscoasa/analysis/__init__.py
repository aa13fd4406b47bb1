"""Threshold decoding and severity evaluation for check_ciscoasa."""

from check_ciscoasa.analysis.aggregator import ResultAggregator
from check_ciscoasa.analysis.evaluator import StatusEvaluator, VPNUsersEvaluator
from check_ciscoasa.analysis.failover import FailoverEvaluator, FailoverState
from check_ciscoasa.analysis.thresholds import (
    ThresholdSpec,
    decode_threshold,
    load_threshold,
)

__all__ = [
    "FailoverEvaluator",
    "FailoverState",
    "ResultAggregator",
    "StatusEvaluator",
    "ThresholdSpec",
    "VPNUsersEvaluator",
    "decode_threshold",
    "load_threshold",
]

"""Failover check as a two-stage state machine.

States advance AWAITING_PRIMARY -> AWAITING_LINK -> PASSED. Either
non-terminal state may drop to FAILED, and FAILED is terminal: once the
primary status check fails the link state is never examined.
"""

from enum import Enum
from typing import Optional

import structlog

from check_ciscoasa.analysis.aggregator import ResultAggregator
from check_ciscoasa.models import CheckResult, MetricCategory, Severity
from check_ciscoasa.parsing import MetricExtractor

logger = structlog.get_logger(__name__)

PRIMARY_EXPECTED = "ON"
LINK_EXPECTED = "UP"
DEFAULT_FAILOVER_MESSAGE = "Failover is up and running"


class FailoverState(str, Enum):
    """Progress of the failover check."""

    AWAITING_PRIMARY = "awaiting_primary"
    AWAITING_LINK = "awaiting_link"
    PASSED = "passed"
    FAILED = "failed"


class FailoverEvaluator:
    """Evaluates 'show failover' output.

    Example:
        >>> result = FailoverEvaluator().evaluate("Failover On\\n...")
        >>> result.severity
        <Severity.CRITICAL: 2>
    """

    def __init__(self, extractor: Optional[MetricExtractor] = None) -> None:
        self._extractor = extractor or MetricExtractor()

    def evaluate(self, transcript: str) -> CheckResult:
        """Drive the state machine over a transcript until it terminates."""
        aggregator = ResultAggregator()
        state = FailoverState.AWAITING_PRIMARY

        while state not in (FailoverState.PASSED, FailoverState.FAILED):
            if state is FailoverState.AWAITING_PRIMARY:
                state = self._check_primary(transcript, aggregator)
            else:
                state = self._check_link(transcript, aggregator)
            logger.debug("failover_transition", state=state.value)

        return aggregator.result(DEFAULT_FAILOVER_MESSAGE)

    def _check_primary(self, transcript: str, aggregator: ResultAggregator) -> FailoverState:
        record = self._extractor.extract_first(transcript, MetricCategory.FAILOVER_PRIMARY)
        if record is None:
            aggregator.add_finding(Severity.CRITICAL, "Failover status not found")
            return FailoverState.FAILED

        if record["status"].strip().upper() != PRIMARY_EXPECTED:
            aggregator.add_finding(Severity.CRITICAL, "Failover status not On")
            return FailoverState.FAILED

        return FailoverState.AWAITING_LINK

    def _check_link(self, transcript: str, aggregator: ResultAggregator) -> FailoverState:
        record = self._extractor.extract_first(transcript, MetricCategory.FAILOVER_LINK)
        if record is None:
            aggregator.add_finding(Severity.CRITICAL, "Failover link information not found")
            return FailoverState.FAILED

        link_state = record["failover_state"].strip()
        if link_state.upper() != LINK_EXPECTED:
            aggregator.add_finding(
                Severity.CRITICAL, f"Failover LAN Interface status {link_state}"
            )
            return FailoverState.FAILED

        return FailoverState.PASSED

"""Tests for FailoverEvaluator."""

from unittest.mock import MagicMock

from check_ciscoasa.analysis import FailoverEvaluator
from check_ciscoasa.analysis.failover import DEFAULT_FAILOVER_MESSAGE
from check_ciscoasa.models import MetricCategory, Severity
from check_ciscoasa.parsing import MetricExtractor

FAILOVER_OUTPUT = """asa# show failover
Failover {status}
Failover unit Primary
Failover LAN Interface: folink GigabitEthernet0/5 ({link})
Unit Poll frequency 1 seconds, holdtime 15 seconds
asa# """


class TestFailoverEvaluator:
    """Tests for the failover state machine."""

    def test_healthy_pair(self) -> None:
        """Failover On with the link up should be OK."""
        result = FailoverEvaluator().evaluate(FAILOVER_OUTPUT.format(status="On", link="up"))

        assert result.severity == Severity.OK
        assert result.message == DEFAULT_FAILOVER_MESSAGE
        assert result.render() == "Failover is up and running | "

    def test_failover_off(self) -> None:
        """Failover Off should be CRITICAL."""
        result = FailoverEvaluator().evaluate(FAILOVER_OUTPUT.format(status="Off", link="up"))

        assert result.severity == Severity.CRITICAL
        assert result.message == "Failover status not On"

    def test_link_down(self) -> None:
        """A LAN interface not up should be CRITICAL and name its state."""
        result = FailoverEvaluator().evaluate(FAILOVER_OUTPUT.format(status="On", link="down"))

        assert result.severity == Severity.CRITICAL
        assert result.message == "Failover LAN Interface status down"

    def test_link_missing(self) -> None:
        """No LAN interface line should be CRITICAL."""
        result = FailoverEvaluator().evaluate("Failover On\nasa# ")

        assert result.severity == Severity.CRITICAL
        assert result.message == "Failover link information not found"

    def test_primary_missing_skips_link(self) -> None:
        """Without a primary status the link must not be examined."""
        extractor = MagicMock(spec=MetricExtractor)
        extractor.extract_first.return_value = None

        result = FailoverEvaluator(extractor=extractor).evaluate("asa# show failover\n")

        assert result.severity == Severity.CRITICAL
        assert result.message == "Failover status not found"
        extractor.extract_first.assert_called_once_with(
            "asa# show failover\n", MetricCategory.FAILOVER_PRIMARY
        )

    def test_crlf_transcript(self) -> None:
        """Carriage returns from the PTY should not break the comparison."""
        transcript = FAILOVER_OUTPUT.format(status="On", link="up").replace("\n", "\r\n")

        result = FailoverEvaluator().evaluate(transcript)

        assert result.severity == Severity.OK

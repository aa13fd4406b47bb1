"""Accumulation of findings, perfdata and the run severity."""

from typing import List, Tuple

from check_ciscoasa.models import CheckResult, Finding, PerfData, Severity

MESSAGE_SEPARATOR = "/"


class ResultAggregator:
    """Collects the outcome of one check run.

    Severity is a ratchet: it starts at OK and every raise keeps the
    maximum of the current and the candidate value, so a later OK rule
    never lowers an earlier WARNING or CRITICAL.
    """

    def __init__(self) -> None:
        self._severity = Severity.OK
        self._findings: List[Finding] = []
        self._metric_entries: List[Tuple[PerfData, ...]] = []

    @property
    def severity(self) -> Severity:
        return self._severity

    @property
    def findings(self) -> List[Finding]:
        return list(self._findings)

    def raise_severity(self, candidate: Severity) -> Severity:
        """Raise the run severity to candidate if it is worse."""
        self._severity = max(self._severity, candidate)
        return self._severity

    def below(self, severity: Severity) -> bool:
        """True while the run severity is still better than severity."""
        return self._severity < severity

    def add_finding(self, severity: Severity, message: str) -> None:
        """Record a fired rule and ratchet the severity."""
        self.raise_severity(severity)
        self._findings.append(Finding(severity=severity, message=message))

    def add_metrics(self, *perfdata: PerfData) -> None:
        """Record the perfdata entry for one extracted record."""
        self._metric_entries.append(tuple(perfdata))

    def result(self, default_message: str) -> CheckResult:
        """Build the final CheckResult.

        Args:
            default_message: Message used when no rule fired

        Returns:
            CheckResult with '/'-joined findings or the default message
        """
        if self._findings:
            message = MESSAGE_SEPARATOR.join(f.message for f in self._findings)
        else:
            message = default_message
        return CheckResult(
            severity=self._severity,
            message=message,
            findings=list(self._findings),
            metric_entries=list(self._metric_entries),
        )

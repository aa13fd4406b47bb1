"""Result models produced by a check run.

Findings and perfdata are plain dataclasses; a CheckResult is the final,
immutable outcome of one invocation.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from check_ciscoasa.models.enums import Severity

# One record matched by a category pattern: field name -> captured text
MetricRecord = Dict[str, str]


@dataclass(frozen=True)
class Finding:
    """Contribution of one evaluation rule to the run."""

    severity: Severity
    message: str


@dataclass(frozen=True)
class PerfData:
    """A single monitoring-plugin perfdata token: 'label'=value[unit]."""

    label: str
    value: str
    unit: str = ""

    def __str__(self) -> str:
        return f"'{self.label}'={self.value}{self.unit}"


@dataclass(frozen=True)
class CheckResult:
    """Aggregated outcome of one check invocation.

    Attributes:
        severity: Worst severity raised during the run
        message: Findings joined with '/', or the check's default text
        findings: Findings in firing order
        metric_entries: Perfdata grouped per extracted record
    """

    severity: Severity
    message: str
    findings: List[Finding] = field(default_factory=list)
    metric_entries: List[Tuple[PerfData, ...]] = field(default_factory=list)

    @property
    def metrics(self) -> str:
        """Flat perfdata string, tokens separated by a single space."""
        return " ".join(str(p) for entry in self.metric_entries for p in entry)

    @property
    def exit_code(self) -> int:
        return int(self.severity)

    def render(self) -> str:
        """Plugin output line: '<message> | <metrics>'."""
        return f"{self.message} | {self.metrics}"

    def __str__(self) -> str:
        return self.render()

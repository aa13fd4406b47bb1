"""Severity evaluation for the status and vpnusers checks.

Evaluators are pure: they take a transcript and decoded thresholds and
return a CheckResult. Rules fire in a fixed order which only affects how
findings are concatenated in the message; the final severity is the
maximum raised by any rule.
"""

from typing import List, Optional

import structlog

from check_ciscoasa.analysis.aggregator import ResultAggregator
from check_ciscoasa.analysis.thresholds import ThresholdSpec
from check_ciscoasa.models import (
    CheckResult,
    MetricCategory,
    MetricRecord,
    PerfData,
    Severity,
)
from check_ciscoasa.parsing import MetricExtractor

logger = structlog.get_logger(__name__)

STATUS_OK = "OK"
DEFAULT_STATUS_MESSAGE = "Everything is Ok"

# CPU horizons in threshold order: (record field, label)
CPU_HORIZONS = (
    ("cpu_5s", "5s"),
    ("cpu_1m", "1m"),
    ("cpu_5m", "5m"),
)

BYTES_PER_MB = 1024 ** 2


def _to_int(value: Optional[str]) -> int:
    """Parse an integer field, degrading to 0 when it is not numeric."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _to_float(value: Optional[str]) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _status_is_ok(record: MetricRecord) -> bool:
    return record.get("status", "").strip() == STATUS_OK


class StatusEvaluator:
    """Evaluates the environment, CPU and memory readings of a device.

    Example:
        >>> evaluator = StatusEvaluator(
        ...     warning=ThresholdSpec(cpu=(70, 50, 30)),
        ...     critical=ThresholdSpec(cpu=(90, 70, 50)),
        ... )
        >>> result = evaluator.evaluate(transcript)
    """

    def __init__(
        self,
        warning: Optional[ThresholdSpec] = None,
        critical: Optional[ThresholdSpec] = None,
        extractor: Optional[MetricExtractor] = None,
    ) -> None:
        self._warning = warning or ThresholdSpec()
        self._critical = critical or ThresholdSpec()
        self._extractor = extractor or MetricExtractor()

    def evaluate(self, transcript: str) -> CheckResult:
        """Run every status rule over a transcript.

        Args:
            transcript: Output of show environment, show cpu and show mem

        Returns:
            CheckResult with one perfdata entry per extracted record
        """
        records = self._extractor.extract_all(
            transcript,
            MetricCategory.AMBIENT_TEMPERATURE,
            MetricCategory.CPU_TEMPERATURE,
            MetricCategory.CPU_UTILIZATION,
            MetricCategory.COOLING_FAN,
            MetricCategory.FREE_MEMORY,
        )
        aggregator = ResultAggregator()

        self._check_ambient(records[MetricCategory.AMBIENT_TEMPERATURE], aggregator)
        self._check_cpu_temperature(records[MetricCategory.CPU_TEMPERATURE], aggregator)
        self._check_cpu_usage(records[MetricCategory.CPU_UTILIZATION], aggregator)
        self._check_cooling(records[MetricCategory.COOLING_FAN], aggregator)
        self._check_memory(records[MetricCategory.FREE_MEMORY], aggregator)

        return aggregator.result(DEFAULT_STATUS_MESSAGE)

    def _check_ambient(
        self, records: List[MetricRecord], aggregator: ResultAggregator
    ) -> None:
        for ambient in records:
            status = ambient["status"].strip()
            logger.debug(
                "ambient_temperature",
                name=ambient["name"],
                temp=ambient["temp"],
                status=status,
            )
            if not _status_is_ok(ambient):
                aggregator.add_finding(
                    Severity.CRITICAL,
                    f"Ambient {ambient['name']} temperature issue {status} ({ambient['temp']} °C)",
                )
            aggregator.add_metrics(PerfData(f"{ambient['name']} [°C]", ambient["temp"]))

    def _check_cpu_temperature(
        self, records: List[MetricRecord], aggregator: ResultAggregator
    ) -> None:
        for cpu in records:
            status = cpu["status"].strip()
            logger.debug("cpu_temperature", number=cpu["number"], temp=cpu["temp"], status=status)
            if not _status_is_ok(cpu):
                aggregator.add_finding(
                    Severity.CRITICAL,
                    f"CPU {cpu['number']} temperature issue {status} ({cpu['temp']} °C)",
                )
            aggregator.add_metrics(PerfData(f"CPU {cpu['number']} [°C]", cpu["temp"]))

    def _check_cpu_usage(
        self, records: List[MetricRecord], aggregator: ResultAggregator
    ) -> None:
        """Compare 5s/1m/5m CPU usage against both threshold triples.

        Critical and warning are separate passes. The warning pass only
        fires while the run is still below WARNING, so at most one warning
        finding is added and none once a critical one fired.
        """
        critical = self._critical.cpu
        warning = self._warning.cpu

        for cpu in records:
            values = [_to_int(cpu[field]) for field, _ in CPU_HORIZONS]
            logger.debug(
                "cpu_usage",
                cpu_5s=cpu["cpu_5s"],
                cpu_1m=cpu["cpu_1m"],
                cpu_5m=cpu["cpu_5m"],
            )

            if critical is not None:
                for (_, label), value, limit in zip(CPU_HORIZONS, values, critical):
                    if value > limit:
                        aggregator.add_finding(
                            Severity.CRITICAL, f"{label} CPU usage {value}% > {limit}%"
                        )

            if warning is not None:
                for (_, label), value, limit in zip(CPU_HORIZONS, values, warning):
                    if value > limit and aggregator.below(Severity.WARNING):
                        aggregator.add_finding(
                            Severity.WARNING, f"{label} CPU usage {value}% > {limit}%"
                        )

            aggregator.add_metrics(
                *(PerfData(f"CPU usage [{label}]", cpu[field], "%") for field, label in CPU_HORIZONS)
            )

    def _check_cooling(
        self, records: List[MetricRecord], aggregator: ResultAggregator
    ) -> None:
        for fan in records:
            status = fan["status"].strip()
            logger.debug("cooling_fan", number=fan["number"], rpm=fan["rpm"], status=status)
            if not _status_is_ok(fan):
                aggregator.add_finding(
                    Severity.CRITICAL,
                    f"Cooling Fan {fan['number']} issue {status} ({fan['rpm']} RPM)",
                )
            aggregator.add_metrics(PerfData(f"Fan {fan['number']} [RPM]", fan["rpm"]))

    def _check_memory(
        self, records: List[MetricRecord], aggregator: ResultAggregator
    ) -> None:
        critical = self._critical.memory
        warning = self._warning.memory

        for memory in records:
            free_mb = _to_float(memory["free_memory"]) / BYTES_PER_MB
            percent_free = _to_int(memory["percent_free_memory"])
            logger.debug("free_memory", free_mb=round(free_mb, 2), percent_free=percent_free)

            if critical is not None and percent_free < critical:
                aggregator.add_finding(
                    Severity.CRITICAL,
                    f"Free memory {percent_free}% lower than {critical}%",
                )

            if (
                warning is not None
                and percent_free < warning
                and aggregator.below(Severity.WARNING)
            ):
                aggregator.add_finding(
                    Severity.WARNING,
                    f"Free memory {percent_free}% lower than {warning}%",
                )

            aggregator.add_metrics(
                PerfData("Free memory [%]", str(percent_free), "%"),
                PerfData("Free memory [MB]", f"{free_mb:.2f}", "MB"),
            )


class VPNUsersEvaluator:
    """Counts remote access VPN sessions and compares against limits."""

    def __init__(
        self,
        warning: Optional[ThresholdSpec] = None,
        critical: Optional[ThresholdSpec] = None,
        extractor: Optional[MetricExtractor] = None,
    ) -> None:
        self._warning = warning or ThresholdSpec()
        self._critical = critical or ThresholdSpec()
        self._extractor = extractor or MetricExtractor()

    def evaluate(self, transcript: str) -> CheckResult:
        """Evaluate the output of 'show uauth'.

        Args:
            transcript: Session transcript containing VPN user lines

        Returns:
            CheckResult with the session count as its only perfdata
        """
        users = self._extractor.extract(transcript, MetricCategory.VPN_USER)
        count = len(users)
        for idx, user in enumerate(users):
            logger.debug("vpn_user", index=idx, username=user["username"])

        aggregator = ResultAggregator()
        # A limit of 0 means no limit
        critical = self._critical.users_vpn
        warning = self._warning.users_vpn

        if critical and count > critical:
            aggregator.add_finding(
                Severity.CRITICAL, f"{count} VPN remote connected users > {critical}"
            )
        if warning and count > warning and aggregator.below(Severity.WARNING):
            aggregator.add_finding(
                Severity.WARNING, f"{count} VPN remote connected users > {warning}"
            )

        aggregator.add_metrics(PerfData("Active users", str(count)))
        return aggregator.result(f"{count} VPN remote connected users")

"""Check definitions: what to send to the appliance and how to judge it.

Each check pairs a fixed command list with an evaluator. ``evaluate`` is
pure and works on a transcript captured earlier; ``run_check`` adds the
SSH round trip in front of it.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import structlog

from check_ciscoasa.analysis import (
    FailoverEvaluator,
    StatusEvaluator,
    VPNUsersEvaluator,
    load_threshold,
)
from check_ciscoasa.collector import ASASession
from check_ciscoasa.config.settings import CheckSettings
from check_ciscoasa.models import CheckCommand, CheckResult

logger = structlog.get_logger(__name__)

_PREAMBLE = ["enable\n\n", "terminal pager 0\n"]


@dataclass(frozen=True)
class CheckDefinition:
    """Static description of one subcommand."""

    name: str
    commands: List[str]
    needs_thresholds: bool = True


CHECKS: Dict[CheckCommand, CheckDefinition] = {
    CheckCommand.STATUS: CheckDefinition(
        name="CheckStatus",
        commands=[*_PREAMBLE, "show environment\n", "show cpu\n", "show mem\n"],
    ),
    CheckCommand.VPN_USERS: CheckDefinition(
        name="CheckVPNUsers",
        commands=[*_PREAMBLE, "show uauth | include remote access VPN user\n"],
    ),
    CheckCommand.FAILOVER: CheckDefinition(
        name="CheckFailover",
        commands=[*_PREAMBLE, "show failover\n"],
        needs_thresholds=False,
    ),
}


def evaluate(
    command: CheckCommand,
    transcript: str,
    warning: str = "",
    critical: str = "",
) -> CheckResult:
    """Evaluate a captured transcript for one check.

    Args:
        command: Which check the transcript belongs to.
        transcript: Raw session output.
        warning: Warning threshold text, empty when not configured.
        critical: Critical threshold text, empty when not configured.

    Returns:
        The aggregated CheckResult.
    """
    if command is CheckCommand.FAILOVER:
        return FailoverEvaluator().evaluate(transcript)

    warning_spec = load_threshold(warning, "warning")
    critical_spec = load_threshold(critical, "critical")

    if command is CheckCommand.STATUS:
        evaluator = StatusEvaluator(warning=warning_spec, critical=critical_spec)
    else:
        evaluator = VPNUsersEvaluator(warning=warning_spec, critical=critical_spec)
    return evaluator.evaluate(transcript)


def run_check(
    settings: CheckSettings,
    session_factory: Optional[Callable[..., ASASession]] = None,
) -> CheckResult:
    """Retrieve the transcript for the configured check and evaluate it.

    Raises:
        CheckError: The session could not be established or completed.
    """
    check = CHECKS[settings.command]
    log = logger.bind(check=check.name, host=settings.host)

    factory = session_factory or ASASession
    session = factory(
        host=settings.host,
        username=settings.username,
        password=settings.password or None,
        identity=settings.identity or None,
        port=settings.port,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
    )
    transcript = session.run(check.commands)

    result = evaluate(settings.command, transcript, settings.warning, settings.critical)
    log.info(
        "check_complete",
        severity=result.severity.label,
        findings=len(result.findings),
    )
    return result

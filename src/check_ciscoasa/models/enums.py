"""Shared enumerations for check_ciscoasa models."""

from enum import Enum, IntEnum


class Severity(IntEnum):
    """Plugin status, ordered from best to worst.

    Values equal the monitoring-plugin exit codes. UNKNOWN is reserved
    for the fatal-error path and is never produced by evaluation rules.
    """

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    @property
    def label(self) -> str:
        """Status label as printed by monitoring plugins."""
        return self.name


class CheckCommand(str, Enum):
    """Check selected on the command line."""

    STATUS = "status"
    VPN_USERS = "vpnusers"
    FAILOVER = "failover"


class MetricCategory(str, Enum):
    """Diagnostic line shapes recognised in a device transcript."""

    COOLING_FAN = "cooling_fan"
    CPU_TEMPERATURE = "cpu_temperature"
    AMBIENT_TEMPERATURE = "ambient_temperature"
    CPU_UTILIZATION = "cpu_utilization"
    FREE_MEMORY = "free_memory"
    VPN_USER = "vpn_user"
    FAILOVER_PRIMARY = "failover_primary"
    FAILOVER_LINK = "failover_link"

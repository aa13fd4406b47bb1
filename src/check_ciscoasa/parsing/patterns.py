"""Line patterns for Cisco ASA diagnostic output.

Each category maps to one compiled pattern whose named groups are the
record fields, in group order. All patterns are case-insensitive and
multi-line: ^ and $ anchor to line boundaries.
"""

import re
from typing import Dict, List, Pattern

from check_ciscoasa.models.enums import MetricCategory

_FLAGS = re.IGNORECASE | re.MULTILINE

CATEGORY_PATTERNS: Dict[MetricCategory, Pattern[str]] = {
    # "  Cooling Fan 1: 5888 RPM - OK"
    MetricCategory.COOLING_FAN: re.compile(
        r"^\s*cooling Fan\s+(?P<number>\d+)\s*:\s+(?P<rpm>\d+)\s+RPM\s+-\s+(?P<status>.+)$",
        _FLAGS,
    ),
    # "  Processor 1: 43.0 C - OK"
    MetricCategory.CPU_TEMPERATURE: re.compile(
        r"^\s*Processor\s+(?P<number>\d+):\s*(?P<temp>\d+\.\d)\s+C\s+-\s+(?P<status>.+)$",
        _FLAGS,
    ),
    # "  Ambient 1: 28.0 C - OK (Chassis Front Temperature)"
    MetricCategory.AMBIENT_TEMPERATURE: re.compile(
        r"^\s*Ambient\s+(?P<number>\d+):\s*(?P<temp>\d+\.\d)\s+C\s+-\s+(?P<status>.*)\s+\((?P<name>.*)\)\s*$",
        _FLAGS,
    ),
    # "CPU utilization for 5 seconds = 1%; 1 minute: 2%; 5 minutes: 3%"
    MetricCategory.CPU_UTILIZATION: re.compile(
        r"^CPU utilization for.*=\s*(?P<cpu_5s>\d*)%;.*:\s*(?P<cpu_1m>\d*)%;.*:\s*(?P<cpu_5m>\d*)%\s*$",
        _FLAGS,
    ),
    # "Free memory:        4544716544 bytes (56%)"
    MetricCategory.FREE_MEMORY: re.compile(
        r"^Free memory:\s+(?P<free_memory>\d+).+\((?P<percent_free_memory>\d*)%\)\s*$",
        _FLAGS,
    ),
    # "remote access VPN user 'jdoe' at 10.10.1.20, authenticated"
    MetricCategory.VPN_USER: re.compile(
        r"^remote access VPN user.*'(?P<username>.*)'.*$",
        _FLAGS,
    ),
    # "Failover On"
    MetricCategory.FAILOVER_PRIMARY: re.compile(
        r"^Failover (?P<status>.*)\s*$",
        _FLAGS,
    ),
    # "Failover LAN Interface: folink GigabitEthernet0/5 (up)"
    MetricCategory.FAILOVER_LINK: re.compile(
        r"^Failover LAN Interface:.*\((?P<failover_state>.*)\)\s*$",
        _FLAGS,
    ),
}


def field_names(category: MetricCategory) -> List[str]:
    """Record field names of a category, in pattern group order."""
    pattern = CATEGORY_PATTERNS[category]
    return sorted(pattern.groupindex, key=pattern.groupindex.__getitem__)

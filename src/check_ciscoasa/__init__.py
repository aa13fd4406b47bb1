"""
check_ciscoasa - Icinga/Nagios check plugin for Cisco ASA appliances.

This package connects to a Cisco ASA over an interactive SSH session,
extracts environment, CPU, memory, VPN and failover readings from the
command transcript, and evaluates them against warning/critical thresholds.

Features:
- Three checks: status, vpnusers, failover
- Thresholds in JSON format with per-field fault tolerance
- Monitoring-plugin output (message | perfdata) and exit codes
- Structured logging (JSON or text) on stderr
"""

__version__ = "1.0.0"
__build__ = "1"
__all__ = ["__version__", "__build__"]

"""
Entry point for the check_ciscoasa monitoring plugin.

Usage:
    check_ciscoasa status   -H <host> -u <user> -c <json> -w <json> [options]
    check_ciscoasa vpnusers -H <host> -u <user> -c <json> -w <json> [options]
    check_ciscoasa failover -H <host> -u <user> [options]
    check_ciscoasa --version

Exit Codes:
    0 - OK
    1 - WARNING
    2 - CRITICAL
    3 - UNKNOWN (session error, configuration error, usage)
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, List, NoReturn, Optional

from check_ciscoasa import __build__, __version__
from check_ciscoasa.models.enums import CheckCommand, Severity

EXIT_UNKNOWN = int(Severity.UNKNOWN)


class PluginArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with the UNKNOWN exit code."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_UNKNOWN, f"{self.prog}: error: {message}\n")


def version_line() -> str:
    return f"check_ciscoasa version {__version__}-build {__build__}"


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser with one subparser per check."""
    from check_ciscoasa.checks import CHECKS

    parser = PluginArgumentParser(
        prog="check_ciscoasa",
        description="Check Cisco ASA health over SSH",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Thresholds:
  JSON object with any of the keys cpu, memory and users_vpn, e.g.
  -c '{"cpu":[90,70,50],"memory":20}' -w '{"cpu":[70,50,30],"memory":30}'
  A users_vpn of 0 means no limit. For status a bare CPU triple such as
  90,70,50 is also accepted.

Environment Variables (only read when CHECK_MODE=TEST):
  CHECK_ASA_COMMAND        status, vpnusers or failover
  CHECK_ASA_HOST           Appliance hostname or IP
  CHECK_ASA_USERNAME       SSH username
  CHECK_ASA_PASSWORD       SSH password
  CHECK_ASA_PASSWORD_FILE  Path to file containing password
  CHECK_ASA_IDENTITY       Private key file
  CHECK_ASA_CRITICAL       Critical threshold
  CHECK_ASA_WARNING        Warning threshold
  CHECK_ASA_CONFIG_PATH    Path to YAML file with the same settings
""",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="{status,vpnusers,failover}")
    helps = {
        CheckCommand.STATUS: "Environment, CPU and memory status",
        CheckCommand.VPN_USERS: "Number of connected remote access VPN users",
        CheckCommand.FAILOVER: "Failover state and LAN interface link",
    }
    for command, check in CHECKS.items():
        sub = subparsers.add_parser(command.value, help=helps[command])
        sub.add_argument("-H", "--host", required=True, help="Hostname or IP address")
        sub.add_argument("-u", "--username", required=True, help="SSH username")
        sub.add_argument(
            "-c",
            "--critical",
            required=check.needs_thresholds,
            help="Critical threshold (JSON)",
        )
        sub.add_argument(
            "-w",
            "--warning",
            required=check.needs_thresholds,
            help="Warning threshold (JSON)",
        )
        credentials = sub.add_mutually_exclusive_group()
        credentials.add_argument("-p", "--password", help="SSH password")
        credentials.add_argument(
            "-i",
            "--identity",
            help="Private key file (default ~/.ssh/id_rsa)",
        )
        sub.add_argument("-P", "--port", type=int, default=22, help="SSH port (default 22)")
        sub.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Log extracted values on stderr",
        )

    return parser


def print_usage(parser: argparse.ArgumentParser) -> int:
    """Print version and usage for an invocation without a check."""
    print(version_line())
    parser.print_usage(sys.stdout)
    return EXIT_UNKNOWN


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for check_ciscoasa.

    Returns:
        Plugin exit code (0=OK, 1=WARNING, 2=CRITICAL, 3=UNKNOWN)
    """
    from check_ciscoasa.checks import CHECKS, run_check
    from check_ciscoasa.config import ConfigurationError, is_test_mode, load_settings
    from check_ciscoasa.exceptions import CheckError
    from check_ciscoasa.logging import configure_logging, get_logger

    parser = build_parser()
    cli_values: Optional[Dict[str, Any]] = None

    if not is_test_mode():
        args = parser.parse_args(argv)
        if args.version:
            print(version_line())
            return EXIT_UNKNOWN
        if args.command is None:
            return print_usage(parser)
        cli_values = vars(args)

    # Keep stdout clean while the configuration is loaded
    configure_logging(log_level="WARNING")

    try:
        settings = load_settings(cli_values)
    except ConfigurationError as e:
        for message in e.errors:
            print(message, file=sys.stderr)
        return EXIT_UNKNOWN

    if settings.version:
        print(version_line())
        return EXIT_UNKNOWN
    if settings.command is None:
        return print_usage(parser)

    configure_logging(
        log_format=settings.log_format,
        log_level="DEBUG" if settings.verbose else "WARNING",
    )
    log = get_logger()
    check = CHECKS[settings.command]

    try:
        result = run_check(settings)
    except CheckError as e:
        log.error("session_failed", check=check.name, host=settings.host, error=str(e))
        print(f"UNKNOWN: Error {check.name} => {e}")
        return e.exit_code
    except Exception as e:
        log.exception("check_failed", check=check.name, host=settings.host)
        print(f"UNKNOWN: Error {check.name} => {e}")
        return EXIT_UNKNOWN

    print(result.render())
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())

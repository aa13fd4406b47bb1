"""Configuration loading from command line values, environment and YAML."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import structlog
import yaml
from pydantic import ValidationError

from check_ciscoasa.config.settings import (
    CONFIG_PATH_ENV,
    ENV_PREFIX,
    CheckSettings,
    CommandLineSettings,
)

TEST_MODE_ENV = "CHECK_MODE"
TEST_MODE_VALUE = "TEST"


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded.

    Attributes:
        errors: One user-facing message per configuration problem.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        self.errors = errors or [message]
        super().__init__(message)


def is_test_mode(environ: Optional[Mapping[str, str]] = None) -> bool:
    """True when parameters must come from the environment, not argv."""
    env = os.environ if environ is None else environ
    return env.get(TEST_MODE_ENV, "").strip().upper() == TEST_MODE_VALUE


def resolve_file_secrets(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Resolve secret files (_FILE suffix) from environment.

    Scans environment for variables matching CHECK_ASA_*_FILE, reads the
    file contents, and returns a dict of lower-cased field names to values.
    A secret is skipped when the plain variable is also set.

    Example:
        CHECK_ASA_PASSWORD_FILE=/run/secrets/asa_password
        -> Returns {"password": "<file contents>"}
    """
    env = os.environ if environ is None else environ
    secrets: Dict[str, str] = {}
    suffix = "_FILE"

    for key, filepath in env.items():
        if not (key.startswith(ENV_PREFIX) and key.endswith(suffix)):
            continue
        base_name = key[len(ENV_PREFIX) : -len(suffix)]
        if f"{ENV_PREFIX}{base_name}" in env:
            continue
        path = Path(filepath)
        if not path.exists():
            # Let validation report whatever is still missing
            structlog.get_logger().warning(
                "secret_file_not_found",
                env_var=key,
                path=filepath,
            )
            continue
        try:
            secrets[base_name.lower()] = path.read_text().strip()
        except PermissionError:
            raise ConfigurationError(
                f"Cannot read secret file '{filepath}' specified by {key}: permission denied"
            )
        except OSError as e:
            raise ConfigurationError(
                f"Error reading secret file '{filepath}' specified by {key}: {e}"
            )

    return secrets


def load_yaml_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML file if specified.

    Args:
        config_path: Path to YAML config file. If None, checks CHECK_ASA_CONFIG_PATH.

    Returns:
        Dict of configuration values from YAML, or empty dict if no file.
    """
    path = config_path or os.environ.get(CONFIG_PATH_ENV)

    if not path:
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except FileNotFoundError:
        raise ConfigurationError(
            f"Configuration file not found: {path}\n"
            f"Ensure {CONFIG_PATH_ENV} points to a valid YAML file."
        )
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file {path}: {e}")
    except PermissionError:
        raise ConfigurationError(f"Cannot read configuration file {path}: permission denied")


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[str]:
    """Format Pydantic validation errors into user-friendly messages."""
    messages: List[str] = []
    for error in errors:
        loc = ".".join(str(part) for part in error.get("loc", []))
        msg = error.get("msg", "Invalid value")
        input_val = error.get("input")

        if not loc:
            messages.append(f"Configuration error: {msg}")
        elif "missing" in msg.lower() or "required" in msg.lower():
            hint = f"Set {ENV_PREFIX}{loc.upper()} or pass --{loc}."
            messages.append(f"Configuration error: '{loc}' is required. {hint}")
        elif input_val is not None and not isinstance(input_val, dict):
            messages.append(f"Configuration error: '{loc}' {msg}, got: {input_val}")
        else:
            messages.append(f"Configuration error: '{loc}' {msg}")

    return messages


def load_settings(
    cli_values: Optional[Dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CheckSettings:
    """Build and validate the settings for one invocation.

    With command line values only those are used; values that are None
    are treated as not given. Without them (test mode) the settings come
    from secret files, the environment, the .env file and the YAML file,
    in that order.

    Args:
        cli_values: Parsed command line values, or None in test mode.
        environ: Environment used for secret file lookup (defaults to os.environ).

    Returns:
        Validated CheckSettings instance.

    Raises:
        ConfigurationError: Files cannot be read or validation fails.
    """
    try:
        if cli_values is not None:
            return CommandLineSettings(
                **{k: v for k, v in cli_values.items() if v is not None}
            )

        # Surface unreadable YAML here, the settings source ignores it silently
        load_yaml_config()
        return CheckSettings(**resolve_file_secrets(environ))
    except ValidationError as e:
        messages = format_validation_errors(e.errors())
        raise ConfigurationError("; ".join(messages), errors=messages) from e

"""Pydantic settings models for check_ciscoasa configuration."""

from __future__ import annotations

import os
from typing import Any, Dict, Literal, Optional, Tuple, Type

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from check_ciscoasa.collector import DEFAULT_IDENTITY
from check_ciscoasa.models.enums import CheckCommand

ENV_PREFIX = "CHECK_ASA_"
CONFIG_PATH_ENV = f"{ENV_PREFIX}CONFIG_PATH"


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads values from a YAML file.

    The YAML file path is taken from the CHECK_ASA_CONFIG_PATH environment
    variable. Used to feed fixture parameters in test mode.
    """

    def get_field_value(
        self, field: Any, field_name: str
    ) -> Tuple[Any, str, bool]:
        """Get field value from YAML config."""
        yaml_config = self._load_yaml_config()
        field_value = yaml_config.get(field_name)
        return field_value, field_name, False

    def _load_yaml_config(self) -> Dict[str, Any]:
        """Load YAML configuration file."""
        config_path = os.environ.get(CONFIG_PATH_ENV)
        if not config_path:
            return {}

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)
                return data if isinstance(data, dict) else {}
        except (FileNotFoundError, yaml.YAMLError, PermissionError):
            # Errors will be handled by loader.py
            return {}

    def __call__(self) -> Dict[str, Any]:
        """Return the YAML config values."""
        return self._load_yaml_config()


class CheckSettings(BaseSettings):
    """Parameters of one check invocation.

    Used in test mode, where parameters come from the environment.
    Command line runs use CommandLineSettings instead. Precedence
    (highest to lowest):
    1. Init arguments (secret files)
    2. Environment variables (CHECK_ASA_ prefix)
    3. .env file
    4. YAML file (via CHECK_ASA_CONFIG_PATH)
    5. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    command: Optional[CheckCommand] = Field(
        default=None,
        description="Check to run: status, vpnusers or failover",
    )
    host: str = Field(default="", description="ASA hostname or IP address")
    username: str = Field(default="", description="SSH username")
    password: str = Field(default="", description="SSH password")
    identity: str = Field(
        default="",
        description=f"Private key file (defaults to {DEFAULT_IDENTITY} without password)",
    )
    port: int = Field(default=22, description="SSH port", ge=1, le=65535)

    critical: str = Field(default="", description="Critical threshold (JSON)")
    warning: str = Field(default="", description="Warning threshold (JSON)")

    verbose: bool = Field(default=False, description="Log extracted values")
    version: bool = Field(default=False, description="Print version and exit")

    timeout: float = Field(
        default=30.0,
        ge=5.0,
        le=300.0,
        description="SSH connect and read timeout in seconds",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="SSH connection retries on network errors",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log output format on stderr: json or text",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to set precedence.

        Secret files (CHECK_ASA_*_FILE) are read by the loader and passed
        as init arguments, so file_secret_settings is not used.
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
        )

    @field_validator("command", mode="before")
    @classmethod
    def normalize_command(cls, v: Any) -> Any:
        """Accept command names in any case; blank means none."""
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @field_validator("host", "username")
    @classmethod
    def strip_value(cls, v: str) -> str:
        return v.strip()

    @model_validator(mode="after")
    def validate_connection(self) -> "CheckSettings":
        """A check needs a host and a username; version alone needs nothing."""
        if self.command is None or self.version:
            return self
        if not self.host:
            raise ValueError("host is required to run a check")
        if not self.username:
            raise ValueError("username is required to run a check")
        return self

    @model_validator(mode="after")
    def default_identity(self) -> "CheckSettings":
        """Fall back to the default key file when no credential is given."""
        if not self.password and not self.identity:
            self.identity = DEFAULT_IDENTITY
        return self


class CommandLineSettings(CheckSettings):
    """Settings built from command line flags alone.

    Outside test mode nothing is read from the environment, .env or YAML,
    so a stray CHECK_ASA_ variable cannot override an explicit flag.
    """

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)

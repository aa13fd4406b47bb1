"""Configuration management for check_ciscoasa."""

from check_ciscoasa.config.loader import ConfigurationError, is_test_mode, load_settings
from check_ciscoasa.config.settings import CheckSettings, CommandLineSettings

__all__ = [
    "CheckSettings",
    "CommandLineSettings",
    "ConfigurationError",
    "is_test_mode",
    "load_settings",
]

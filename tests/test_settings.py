"""Tests for CheckSettings and the configuration loader."""

import pytest
from pydantic import ValidationError

from check_ciscoasa.config import CheckSettings, ConfigurationError, is_test_mode, load_settings
from check_ciscoasa.config.loader import (
    format_validation_errors,
    load_yaml_config,
    resolve_file_secrets,
)
from check_ciscoasa.models import CheckCommand


class TestCheckSettings:
    """Tests for CheckSettings validation."""

    def test_defaults(self, clean_env) -> None:
        """Unset optional fields should take their defaults."""
        settings = CheckSettings(command="failover", host="asa", username="monitor")

        assert settings.port == 22
        assert settings.timeout == 30.0
        assert settings.max_retries == 2
        assert settings.log_format == "text"
        assert settings.warning == ""
        assert settings.critical == ""
        assert settings.verbose is False

    def test_identity_defaults_without_password(self, clean_env) -> None:
        """No password and no identity should fall back to the default key."""
        settings = CheckSettings(command="status", host="asa", username="monitor")

        assert settings.identity == "~/.ssh/id_rsa"

    def test_password_keeps_identity_empty(self, clean_env) -> None:
        """A password should not pull in the default key."""
        settings = CheckSettings(
            command="status", host="asa", username="monitor", password="secret"
        )

        assert settings.identity == ""

    def test_command_is_case_insensitive(self, clean_env) -> None:
        """Command names should be accepted in any case."""
        settings = CheckSettings(command="VPNUsers", host="asa", username="monitor")

        assert settings.command is CheckCommand.VPN_USERS

    def test_unknown_command_rejected(self, clean_env) -> None:
        """Unknown commands should fail validation."""
        with pytest.raises(ValidationError):
            CheckSettings(command="reboot", host="asa", username="monitor")

    def test_host_required_for_a_check(self, clean_env) -> None:
        """A command without a host should fail validation."""
        with pytest.raises(ValidationError, match="host is required"):
            CheckSettings(command="status", username="monitor")

    def test_version_needs_no_host(self, clean_env) -> None:
        """Version requests should validate without connection details."""
        settings = CheckSettings(command="status", version=True)

        assert settings.version is True

    @pytest.mark.parametrize("port", [0, 65536])
    def test_port_range(self, clean_env, port: int) -> None:
        """Ports outside 1-65535 should be rejected."""
        with pytest.raises(ValidationError):
            CheckSettings(command="status", host="asa", username="monitor", port=port)

    def test_environment_variables(self, clean_env) -> None:
        """CHECK_ASA_ variables should populate the settings."""
        clean_env.setenv("CHECK_ASA_COMMAND", "failover")
        clean_env.setenv("CHECK_ASA_HOST", "10.0.0.1")
        clean_env.setenv("CHECK_ASA_USERNAME", "monitor")
        clean_env.setenv("CHECK_ASA_PORT", "2222")
        clean_env.setenv("CHECK_ASA_VERBOSE", "true")

        settings = CheckSettings()

        assert settings.command is CheckCommand.FAILOVER
        assert settings.host == "10.0.0.1"
        assert settings.port == 2222
        assert settings.verbose is True

    def test_init_values_override_environment(self, clean_env) -> None:
        """Command line values should win over the environment."""
        clean_env.setenv("CHECK_ASA_HOST", "from-env")

        settings = CheckSettings(command="failover", host="from-cli", username="monitor")

        assert settings.host == "from-cli"


class TestYamlSource:
    """Tests for the YAML settings source."""

    def test_yaml_values_are_used(self, clean_env, tmp_path) -> None:
        """Values from the YAML file should fill unset fields."""
        config = tmp_path / "asa.yaml"
        config.write_text(
            "command: vpnusers\n"
            "host: asa.lab\n"
            "username: monitor\n"
            "warning: '{\"users_vpn\": 3}'\n"
        )
        clean_env.setenv("CHECK_ASA_CONFIG_PATH", str(config))

        settings = CheckSettings()

        assert settings.command is CheckCommand.VPN_USERS
        assert settings.host == "asa.lab"
        assert settings.warning == '{"users_vpn": 3}'

    def test_environment_wins_over_yaml(self, clean_env, tmp_path) -> None:
        """Environment variables should take precedence over YAML."""
        config = tmp_path / "asa.yaml"
        config.write_text("command: status\nhost: yaml-host\nusername: monitor\n")
        clean_env.setenv("CHECK_ASA_CONFIG_PATH", str(config))
        clean_env.setenv("CHECK_ASA_HOST", "env-host")

        assert CheckSettings().host == "env-host"

    def test_missing_yaml_raises(self, clean_env, tmp_path) -> None:
        """A configured but missing YAML file should be reported."""
        clean_env.setenv("CHECK_ASA_CONFIG_PATH", str(tmp_path / "missing.yaml"))

        with pytest.raises(ConfigurationError, match="not found"):
            load_yaml_config()

    def test_invalid_yaml_raises(self, clean_env, tmp_path) -> None:
        """Broken YAML should be reported."""
        config = tmp_path / "bad.yaml"
        config.write_text("host: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_yaml_config(str(config))


class TestSecretFiles:
    """Tests for CHECK_ASA_*_FILE secrets."""

    def test_secret_file_is_read(self, tmp_path) -> None:
        """The file content should become the field value."""
        secret = tmp_path / "password"
        secret.write_text("s3cret\n")

        secrets = resolve_file_secrets({"CHECK_ASA_PASSWORD_FILE": str(secret)})

        assert secrets == {"password": "s3cret"}

    def test_plain_variable_wins(self, tmp_path) -> None:
        """A plain variable should shadow the secret file."""
        secret = tmp_path / "password"
        secret.write_text("from-file")

        secrets = resolve_file_secrets(
            {"CHECK_ASA_PASSWORD_FILE": str(secret), "CHECK_ASA_PASSWORD": "plain"}
        )

        assert secrets == {}

    def test_missing_secret_file_is_skipped(self, tmp_path) -> None:
        """A missing secret file should be skipped."""
        secrets = resolve_file_secrets({"CHECK_ASA_PASSWORD_FILE": str(tmp_path / "nope")})

        assert secrets == {}

    def test_config_path_is_not_a_secret(self, tmp_path) -> None:
        """Only the _FILE suffix should be treated as a secret."""
        secrets = resolve_file_secrets({"CHECK_ASA_CONFIG_PATH": str(tmp_path)})

        assert secrets == {}


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_cli_values_drop_none(self, clean_env) -> None:
        """None values should not override defaults."""
        settings = load_settings(
            {
                "command": "status",
                "host": "asa",
                "username": "monitor",
                "password": None,
                "identity": None,
                "port": 22,
                "critical": '{"cpu": [90, 70, 50]}',
                "warning": None,
            }
        )

        assert settings.warning == ""
        assert settings.identity == "~/.ssh/id_rsa"

    def test_secret_file_supplies_password(self, clean_env, tmp_path) -> None:
        """A password secret file should be used in test mode."""
        secret = tmp_path / "password"
        secret.write_text("from-file")
        clean_env.setenv("CHECK_ASA_PASSWORD_FILE", str(secret))
        clean_env.setenv("CHECK_ASA_COMMAND", "failover")
        clean_env.setenv("CHECK_ASA_HOST", "asa")
        clean_env.setenv("CHECK_ASA_USERNAME", "monitor")

        settings = load_settings()

        assert settings.password == "from-file"
        assert settings.identity == ""

    def test_cli_values_ignore_secrets_and_yaml(self, clean_env, tmp_path) -> None:
        """Command line runs should not read secret files or the YAML file."""
        secret = tmp_path / "password"
        secret.write_text("from-file")
        config = tmp_path / "asa.yaml"
        config.write_text("warning: '{\"users_vpn\": 1}'\n")
        clean_env.setenv("CHECK_ASA_PASSWORD_FILE", str(secret))
        clean_env.setenv("CHECK_ASA_CONFIG_PATH", str(config))

        settings = load_settings({"command": "failover", "host": "asa", "username": "monitor"})

        assert settings.password == ""
        assert settings.warning == ""
        assert settings.identity == "~/.ssh/id_rsa"

    def test_empty_port_variable_uses_default(self, clean_env) -> None:
        """An empty CHECK_ASA_PORT should fall back to port 22."""
        clean_env.setenv("CHECK_ASA_COMMAND", "failover")
        clean_env.setenv("CHECK_ASA_HOST", "asa")
        clean_env.setenv("CHECK_ASA_USERNAME", "monitor")
        clean_env.setenv("CHECK_ASA_PORT", "")

        assert load_settings().port == 22

    def test_validation_errors_become_configuration_error(self, clean_env) -> None:
        """Validation failures should be reported as ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings({"command": "status", "username": "monitor"})

        assert any("host is required" in message for message in exc_info.value.errors)

    def test_is_test_mode(self) -> None:
        """Only CHECK_MODE=TEST should enable test mode."""
        assert is_test_mode({"CHECK_MODE": "TEST"})
        assert is_test_mode({"CHECK_MODE": "test"})
        assert not is_test_mode({"CHECK_MODE": "PROD"})
        assert not is_test_mode({})


class TestFormatValidationErrors:
    """Tests for format_validation_errors()."""

    def test_field_error_names_field(self) -> None:
        """Field errors should name the field and the bad input."""
        messages = format_validation_errors(
            [{"loc": ("port",), "msg": "Input should be less than or equal to 65535", "input": 70000}]
        )

        assert messages == [
            "Configuration error: 'port' Input should be less than or equal to 65535, got: 70000"
        ]

    def test_model_error_without_location(self) -> None:
        """Model-level errors should be reported without a field name."""
        messages = format_validation_errors([{"loc": (), "msg": "Value error, bad"}])

        assert messages == ["Configuration error: Value error, bad"]

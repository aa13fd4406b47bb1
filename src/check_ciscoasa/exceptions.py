"""Custom exceptions for check_ciscoasa.

All exceptions inherit from CheckError for consistent error handling.
Each exception carries a monitoring-plugin exit code and an optional
troubleshooting hint.
"""

from typing import Optional

from check_ciscoasa.models.enums import Severity


class CheckError(Exception):
    """Base exception for all check errors.

    Attributes:
        message: Human-readable error message.
        hint: Optional troubleshooting hint.
        exit_code: Plugin exit code to use when the error is fatal.
    """

    exit_code: int = int(Severity.UNKNOWN)

    def __init__(
        self,
        message: str,
        hint: Optional[str] = None,
        exit_code: Optional[int] = None,
    ) -> None:
        self.message = message
        self.hint = hint
        if exit_code is not None:
            self.exit_code = exit_code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional hint."""
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


class SessionError(CheckError):
    """The SSH session to the appliance failed.

    This typically occurs when:
    - The appliance is unreachable or the port is filtered
    - The SSH handshake fails
    - The channel closes before the prompt is seen
    """

    def __init__(
        self,
        message: str = "SSH session to the appliance failed",
        host: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        self.host = host
        super().__init__(message=message, hint=hint)


class AuthenticationError(SessionError):
    """SSH authentication was rejected by the appliance."""

    def __init__(
        self,
        message: str = "SSH authentication failed",
        host: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        if hint is None:
            hint = "check the username and the password or private key file"
        super().__init__(message=message, host=host, hint=hint)


class SessionTimeoutError(SessionError):
    """No prompt was seen before the read timeout expired."""

    def __init__(
        self,
        timeout: float,
        host: Optional[str] = None,
    ) -> None:
        self.timeout = timeout
        super().__init__(
            message=f"Timed out after {timeout}s waiting for the device prompt",
            host=host,
        )


class ThresholdDecodeError(CheckError):
    """A threshold specification could not be decoded.

    Raised by the decoder only. Callers recover from it by skipping the
    checks that depend on the threshold.
    """

    def __init__(self, text: str, reason: str) -> None:
        self.text = text
        self.reason = reason
        super().__init__(message=f"Invalid threshold {text!r}: {reason}")

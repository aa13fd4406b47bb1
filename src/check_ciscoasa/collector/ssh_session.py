"""Interactive SSH session to a Cisco ASA.

The ASA CLI needs a PTY and an interactive shell: commands are typed one
after another and each is considered complete when the device prompt
shows up again. Everything echoed back is kept as the raw transcript.
"""

import codecs
import logging
import os
import re
import socket
from typing import Any, Callable, List, Optional, Pattern, Sequence, Union


import paramiko
import structlog
from paramiko import MissingHostKeyPolicy, PKey
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from check_ciscoasa.exceptions import (
    AuthenticationError,
    SessionError,
    SessionTimeoutError,
)

logger = structlog.get_logger(__name__)

# Matches "ciscoasa>", "ciscoasa# " and the enable "Password:" prompt
PROMPT_PATTERN = r"(?i)^(.*\>.?)|(.*\#.?)|(Password:.?)$"

DEFAULT_IDENTITY = "~/.ssh/id_rsa"

_RECV_BUFFER = 65535


class WarningHostKeyPolicy(MissingHostKeyPolicy):
    """Host key policy that logs a warning but allows connections.

    Appliances checked by a monitoring system are usually reached on a
    management network, and their keys are rarely pre-seeded in the
    poller's known_hosts file.
    """

    def missing_host_key(
        self,
        client: paramiko.SSHClient,
        hostname: str,
        key: PKey,
    ) -> None:
        """Log warning when host key is not in known_hosts."""
        logger.warning(
            "ssh_host_key_not_verified",
            hostname=hostname,
            key_type=key.get_name(),
            fingerprint=key.get_fingerprint().hex(":"),
        )


def create_retry_decorator(
    max_retries: int = 2,
    min_wait: float = 1,
    max_wait: float = 10,
    log_level: int = logging.WARNING,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Create a tenacity retry decorator for connection attempts.

    Retries on SessionError with exponential backoff. Authentication
    failures are never retried.

    Args:
        max_retries: Number of retries after the first attempt.
        min_wait: Minimum wait time in seconds between retries.
        max_wait: Maximum wait time in seconds between retries.
        log_level: Log level for retry attempt messages.

    Returns:
        A tenacity retry decorator.
    """
    stdlib_logger = logging.getLogger(__name__)

    return retry(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=(
            retry_if_exception_type(SessionError)
            & retry_if_not_exception_type(AuthenticationError)
        ),
        before_sleep=before_sleep_log(stdlib_logger, log_level),
        reraise=True,
    )


class ASASession:
    """Sends a command list to a Cisco ASA and captures the transcript.

    Example:
        >>> session = ASASession(host="10.0.0.1", username="monitor", password="secret")
        >>> transcript = session.run(["terminal pager 0\\n", "show cpu\\n"])
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: Optional[str] = None,
        identity: Optional[str] = None,
        port: int = 22,
        timeout: float = 30.0,
        max_retries: int = 2,
    ) -> None:
        """Initialize the session parameters.

        Args:
            host: Appliance hostname or IP address.
            username: SSH username.
            password: SSH password. Takes precedence over identity.
            identity: Private key file used when no password is given.
            port: SSH port (default 22).
            timeout: Connect and per-read timeout in seconds.
            max_retries: Connection retries on network or SSH errors.
        """
        self.host = host
        self.username = username
        self.password = password
        self.identity = identity or DEFAULT_IDENTITY
        self.port = port
        self.timeout = timeout
        self.max_retries = max_retries

    def run(
        self,
        commands: Sequence[str],
        prompt_pattern: Union[str, Pattern[str]] = PROMPT_PATTERN,
    ) -> str:
        """Open a shell, send every command and return the transcript.

        Args:
            commands: Command strings, each including its trailing newline.
            prompt_pattern: Regex matched against the last line received.

        Returns:
            Everything the device echoed back, banner and prompts included.

        Raises:
            AuthenticationError: Credentials were rejected.
            SessionTimeoutError: The prompt did not come back in time.
            SessionError: Any other connection or channel failure.
        """
        prompt = re.compile(prompt_pattern) if isinstance(prompt_pattern, str) else prompt_pattern
        connect = create_retry_decorator(max_retries=self.max_retries)(self._connect)
        client = connect()
        try:
            channel = client.invoke_shell(term="vt100", width=512, height=24)
            channel.settimeout(self.timeout)
            decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

            chunks: List[str] = [self._read_until_prompt(channel, prompt, decoder)]
            for command in commands:
                logger.debug("command_sent", host=self.host, command=command.strip())
                channel.send(command)
                chunks.append(self._read_until_prompt(channel, prompt, decoder))
            channel.close()
        except SessionError:
            raise
        except (paramiko.SSHException, OSError) as e:
            raise SessionError(message=f"SSH channel error: {e}", host=self.host) from e
        finally:
            client.close()

        transcript = "".join(chunks)
        logger.debug("transcript_captured", host=self.host, length=len(transcript))
        return transcript

    def _connect(self) -> paramiko.SSHClient:
        """Establish the SSH connection.

        Returns:
            Connected SSH client.

        Raises:
            AuthenticationError: Authentication rejected or key unusable.
            SessionError: Connection failed.
        """
        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(WarningHostKeyPolicy())

        credentials: dict = {"look_for_keys": False, "allow_agent": False}
        if self.password:
            credentials["password"] = self.password
        else:
            credentials["key_filename"] = os.path.expanduser(self.identity)

        logger.info(
            "session_connecting",
            host=self.host,
            port=self.port,
            auth="password" if self.password else "key",
        )
        try:
            client.connect(
                hostname=self.host,
                port=self.port,
                username=self.username,
                timeout=self.timeout,
                **credentials,
            )
            logger.debug("session_connected", host=self.host, port=self.port)
            return client
        except paramiko.AuthenticationException as e:
            client.close()
            raise AuthenticationError(host=self.host) from e
        except FileNotFoundError as e:
            client.close()
            raise AuthenticationError(
                message=f"Private key file not found: {self.identity}",
                host=self.host,
            ) from e
        except (paramiko.SSHException, OSError) as e:
            client.close()
            raise SessionError(
                message=f"SSH connection to {self.host}:{self.port} failed: {e}",
                host=self.host,
            ) from e

    def _read_until_prompt(
        self,
        channel: paramiko.Channel,
        prompt: Pattern[str],
        decoder: codecs.IncrementalDecoder,
    ) -> str:
        """Read from the channel until the last line matches the prompt.

        The decoder is shared across reads so a UTF-8 sequence split
        between two chunks is decoded once both halves have arrived.
        """
        chunks: List[str] = []
        tail = ""
        while True:
            try:
                data = channel.recv(_RECV_BUFFER)
            except socket.timeout as e:
                raise SessionTimeoutError(self.timeout, host=self.host) from e
            if not data:
                raise SessionError(
                    message="Channel closed before the device prompt was seen",
                    host=self.host,
                )
            text = decoder.decode(data)
            chunks.append(text)
            tail = (tail + text).rsplit("\n", 1)[-1]
            if tail and prompt.search(tail):
                return "".join(chunks)

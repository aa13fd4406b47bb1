"""Transcript retrieval from Cisco ASA appliances."""

from .ssh_session import (
    DEFAULT_IDENTITY,
    PROMPT_PATTERN,
    ASASession,
    WarningHostKeyPolicy,
    create_retry_decorator,
)

__all__ = [
    "ASASession",
    "DEFAULT_IDENTITY",
    "PROMPT_PATTERN",
    "WarningHostKeyPolicy",
    "create_retry_decorator",
]

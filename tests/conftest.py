"""Shared pytest fixtures."""

import logging

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging so later tests never write to a closed capture stream."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove plugin variables from the environment and run from an empty directory."""
    import os

    for key in list(os.environ):
        if key.startswith("CHECK_ASA_") or key == "CHECK_MODE":
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return monkeypatch

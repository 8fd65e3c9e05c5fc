"""Shared pytest fixtures for auditgate tests.

No npm or network access is needed: the audit command is always mocked and
reports are fed in as JSON text.
"""

import os
from unittest.mock import patch

import pytest
from structlog.testing import capture_logs


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drop AUDITGATE_* variables inherited from the developer's shell."""
    for key in list(os.environ):
        if key.startswith("AUDITGATE_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def log_events():
    """Capture structlog events instead of configuring real handlers."""
    with patch("auditgate.cli.setup_logging"), capture_logs() as events:
        yield events

"""Shared fixtures for the notifier test-suite."""

from __future__ import annotations

import logging
from pathlib import Path
import sys

import pytest
import structlog

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:  # pragma: no cover - import-time guard
    sys.path.insert(0, str(ROOT))

from webex_notify import config  # noqa: E402

ENV_VARS = (
    "WEBEX_ACCESS_TOKEN",
    "WEBEX_API_URL",
    "WEBEX_TIMEOUT",
    "WEBEX_MAX_FILE_SIZE",
    "WEBEX_ALLOWED_EXTENSIONS",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Start every test without Webex settings leaking in from the shell."""

    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo ``configure_logging`` so handlers never outlive a CLI runner's streams."""

    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

"""Shared test fixtures for chartsignal."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from unittest.mock import patch

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo any setup_logging() call so handlers never outlive a test."""
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


@pytest.fixture
def clean_env() -> Iterator[None]:
    """Run with every CHARTSIGNAL_* variable removed from the environment."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("CHARTSIGNAL_")}
    with patch.dict(os.environ, env, clear=True):
        yield

"""Unit-specific fixtures (filesystem only, HTTP mocked with respx)."""

from __future__ import annotations

import pytest
import structlog


@pytest.fixture()
def reset_structlog():
    """Restore structlog's defaults after a test configures it."""
    yield
    structlog.reset_defaults()

"""Fixtures for route tests: an app wired to an isolated ServiceContext."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from cottontrace.web.app import create_app


@pytest.fixture
def app(context):
    """Full application around the test context."""
    return create_app(context)


@pytest.fixture
def client(app):
    """Test client; the context manager runs startup and shutdown."""
    with TestClient(app) as test_client:
        yield test_client

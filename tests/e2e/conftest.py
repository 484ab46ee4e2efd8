"""E2E test configuration and fixtures."""
from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from ajax_invocation.demo import create_demo_app


@pytest.fixture
def client():
    """Test client for the demo application."""
    with TestClient(create_demo_app()) as test_client:
        yield test_client

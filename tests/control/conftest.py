"""
Control Test Configuration and Fixtures

Shared fixtures for control client tests.
"""

import pytest
from fake_obs import FakeOBSConnection

from control.implementations.mock_control import MockControlClient
from control.implementations.obs_websocket_client import OBSWebSocketClient

# =============================================================================
# CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def fake_obs():
    """Provide a fake OBS connection."""
    return FakeOBSConnection()


@pytest.fixture
def make_client():
    """
    Build OBSWebSocketClient instances wired to a fake connection.

    Usage:
        def test_x(make_client, fake_obs):
            client = make_client(fake_obs)
            client.connect()
    """
    clients = []

    def factory(connection, **kwargs):
        kwargs.setdefault("identify_timeout", 1.0)
        kwargs.setdefault("request_timeout", 1.0)
        client = OBSWebSocketClient(
            url="ws://obs.test:4444",
            connection_factory=lambda url: connection,
            **kwargs,
        )
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def mock_client():
    """Provide a connected MockControlClient."""
    return MockControlClient()


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """
    Configure pytest with custom markers for control tests.
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "unit_integration: Integration tests")

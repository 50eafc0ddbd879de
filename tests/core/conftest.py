"""
Core Test Configuration and Fixtures

Shared fixtures for state store, retry and event tests.
"""

import shutil
import tempfile
from pathlib import Path

import pytest

from core.state_store import StateStore

# =============================================================================
# STATE FIXTURES
# =============================================================================


@pytest.fixture
def state_store():
    """Provide an empty StateStore."""
    return StateStore()


# =============================================================================
# ORCHESTRATOR DOUBLE
# =============================================================================


@pytest.fixture
def orchestrator_spy():
    """
    Provide an object recording the orchestrator calls made by the dispatcher.

    Usage:
        def test_dispatch(orchestrator_spy):
            dispatcher = EventDispatcher(store, orchestrator_spy)
            dispatcher.dispatch(DecisionGiven(9000))
            assert orchestrator_spy.calls == [("on_decision", (9000,))]
    """

    class OrchestratorSpy:
        def __init__(self):
            self.calls = []
            self.accept = True

        def on_attempt_start(self, *args):
            self.calls.append(("on_attempt_start", args))
            return self.accept

        def on_decision(self, *args):
            self.calls.append(("on_decision", args))
            return self.accept

        def force_stop(self):
            self.calls.append(("force_stop", ()))

        def get_status(self):
            self.calls.append(("get_status", ()))
            return {"state": "idle"}

    return OrchestratorSpy()


# =============================================================================
# TEMPORARY DIRECTORY FIXTURES
# =============================================================================


@pytest.fixture
def temp_dir():
    """Provide a temporary directory, removed after the test."""
    path = Path(tempfile.mkdtemp())

    yield path

    if path.exists():
        shutil.rmtree(path)


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """
    Configure pytest with custom markers for core tests.
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "unit_integration: Integration tests")

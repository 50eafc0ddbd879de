"""
Storage Test Configuration and Fixtures

Fixtures shared across storage tests.

To use pytest:
    pip install -e .[test]
    pytest tests/storage/
"""

import shutil
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from core.state_store import AttemptState, LiftType
from storage.managers.file_organizer import FileOrganizer

# =============================================================================
# DIRECTORY FIXTURES
# =============================================================================


@pytest.fixture
def temp_dir():
    """
    Provide a temporary working directory.

    Directory is automatically cleaned up after test.
    """
    path = Path(tempfile.mkdtemp())

    yield path

    if path.exists():
        shutil.rmtree(path)


@pytest.fixture
def video_root(temp_dir):
    return temp_dir / "videos"


@pytest.fixture
def organizer(video_root):
    """Provide a FileOrganizer moving clips under a temporary root."""
    return FileOrganizer(video_root)


# =============================================================================
# ATTEMPT FIXTURES
# =============================================================================


@pytest.fixture
def attempt():
    """Jane Doe's first snatch in session 'Group A'."""
    return AttemptState(
        athlete="Jane Doe",
        lift_type=LiftType.SNATCH,
        attempt_number=1,
        session_name="Group A",
        start_time_ms=1000,
        stop_time_ms=9000,
    )


@pytest.fixture
def timestamp():
    return datetime(2025, 3, 1, 14, 5, 9)


@pytest.fixture
def make_trimmed(temp_dir):
    """
    Create fake trimmed clips in a captures directory.

    Usage:
        def test_x(make_trimmed):
            clip = make_trimmed("1")  # captures/Camera1.mp4
    """
    captures = temp_dir / "captures"
    captures.mkdir()

    def factory(camera_index: str, content: bytes = b"trimmed video") -> Path:
        path = captures / f"Camera{camera_index}.mp4"
        path.write_bytes(content)
        return path

    return factory


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """
    Configure pytest with custom markers for storage tests.
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "unit_integration: Integration tests")

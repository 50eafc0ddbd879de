"""
Recording Test Configuration and Fixtures

Shared fixtures for recording module tests.
"""

import shutil
import subprocess
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from control.constants import ControlAction
from control.implementations.mock_control import MockControlClient
from core.state_store import StateStore
from recording.controllers.recording_orchestrator import RecordingOrchestrator
from recording.implementations.mock_trimmer import MockTrimmer
from status.implementations.mock_sink import MockStatusSink
from storage.managers.file_organizer import FileOrganizer

HOTKEYS = {
    ControlAction.RESET: "OBS_KEY_F6",
    ControlAction.START: "OBS_KEY_F7",
    ControlAction.STOP: "OBS_KEY_F8",
}

ATTEMPT_TIME = datetime(2025, 3, 1, 14, 5, 9)

# =============================================================================
# TEMPORARY FILE/DIRECTORY FIXTURES
# =============================================================================


@pytest.fixture
def temp_dir():
    """
    Provide temporary directory for captures and clips.

    Directory is automatically cleaned up after test.
    """
    path = Path(tempfile.mkdtemp())

    yield path

    if path.exists():
        shutil.rmtree(path)


@pytest.fixture
def capture_dir(temp_dir):
    path = temp_dir / "Captures"
    path.mkdir()
    return path


@pytest.fixture
def video_root(temp_dir):
    return temp_dir / "videos"


@pytest.fixture
def make_capture(capture_dir):
    """
    Create fake raw camera captures.

    Usage:
        def test_x(make_capture):
            raw = make_capture("1")  # Captures/Camera1.flv
    """

    def factory(camera_index: str, content: bytes = None, extension: str = ".flv") -> Path:
        path = capture_dir / f"Camera{camera_index}{extension}"
        path.write_bytes(content if content is not None else f"raw {camera_index}".encode())
        return path

    return factory


# =============================================================================
# SUBPROCESS FIXTURES
# =============================================================================


@pytest.fixture
def fake_ffmpeg():
    """
    Provide a scripted stand-in for subprocess.run.

    Each call pops the next return code (0 when the script is empty).
    A zero exit writes the output file, like a real ffmpeg run.

    Usage:
        def test_x(fake_ffmpeg):
            fake_ffmpeg.codes = [1, 1, 0]
            trimmer = FFmpegTrimmer(runner=fake_ffmpeg, sleep=lambda s: None)
    """

    class FakeFFmpeg:
        def __init__(self):
            self.codes = []
            self.commands = []

        def __call__(self, command):
            self.commands.append(command)
            code = self.codes.pop(0) if self.codes else 0
            if code == 0:
                Path(command[-1]).write_bytes(b"trimmed")
                return subprocess.CompletedProcess(command, 0, stderr=b"")
            # Failed runs may leave a partial file behind
            Path(command[-1]).write_bytes(b"partial")
            return subprocess.CompletedProcess(
                command,
                code,
                stderr=b"frame=0\nCamera1.flv: Resource temporarily unavailable\n",
            )

    return FakeFFmpeg()


# =============================================================================
# ORCHESTRATOR FIXTURES
# =============================================================================


@pytest.fixture
def control():
    return MockControlClient()


@pytest.fixture
def trimmer():
    return MockTrimmer()


@pytest.fixture
def status_sink():
    return MockStatusSink()


@pytest.fixture
def state_store():
    return StateStore()


@pytest.fixture
def make_orchestrator(control, trimmer, status_sink, state_store, capture_dir, video_root):
    """
    Build RecordingOrchestrator instances on mocks and temp directories.

    Pipelines run inline (background=False) unless asked otherwise, and
    no real sleeping happens.
    """
    orchestrators = []

    def factory(**overrides):
        kwargs = {
            "control": control,
            "trimmer": trimmer,
            "organizer": FileOrganizer(video_root),
            "state_store": state_store,
            "status_sink": status_sink,
            "capture_dir": capture_dir,
            "hotkeys": HOTKEYS,
            "lead_ms": 5000,
            "settle_delay": 3.0,
            "sleep": lambda seconds: None,
            "clock": lambda: ATTEMPT_TIME,
            "background": False,
        }
        kwargs.update(overrides)
        orchestrator = RecordingOrchestrator(**kwargs)
        orchestrators.append(orchestrator)
        return orchestrator

    yield factory

    for orchestrator in orchestrators:
        orchestrator.shutdown(timeout=5.0)


@pytest.fixture
def orchestrator(make_orchestrator):
    """Provide an inline RecordingOrchestrator."""
    return make_orchestrator()


# =============================================================================
# CALLBACK TRACKING FIXTURES
# =============================================================================


@pytest.fixture
def callback_tracker():
    """
    Provide helper for tracking callback calls.

    Usage:
        def test_callback(orchestrator, callback_tracker):
            orchestrator.on_error = callback_tracker.track
            # ... trigger error ...
            assert callback_tracker.was_called()
    """

    class CallbackTracker:
        def __init__(self):
            self.calls = []

        def track(self, *args, **kwargs):
            """Record a callback invocation"""
            self.calls.append({"args": args, "kwargs": kwargs})

        def was_called(self) -> bool:
            return len(self.calls) > 0

        def get_call_count(self) -> int:
            return len(self.calls)

        def get_last_call(self):
            return self.calls[-1] if self.calls else None

    return CallbackTracker()


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """
    Configure pytest with custom markers for recording tests.
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "unit_integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
    config.addinivalue_line("markers", "requires_ffmpeg: Tests requiring FFmpeg")

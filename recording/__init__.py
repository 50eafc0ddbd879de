"""
Recording Module

Per-attempt capture cycle: arm the capture tool on an attempt start, stop
it on the decision, then trim every camera's capture and file the clips.

Provides automatic detection and graceful fallback between real FFmpeg
trimming and a mock implementation for testing.

Public API:
    - RecordingOrchestrator: State machine driving the capture cycle
    - AttemptResult: Outcome of one trim pipeline run
    - RecorderConfig: YAML-backed recorder settings
    - TrimmerFactory: Factory for creating trimmer implementations
    - TrimmerInterface: Trimmer contract
    - RecordingError: Custom exceptions
    - RecordingState: State enumeration

Usage:
    from recording import RecordingOrchestrator, TrimmerFactory

    trimmer = TrimmerFactory.create_trimmer()
    orchestrator = RecordingOrchestrator(client, trimmer, organizer, store)
    orchestrator.start()

    orchestrator.on_attempt_start("Jane Doe", "SNATCH", 1, start_ms)
    orchestrator.on_decision(stop_ms)
"""

from recording.config import RecorderConfig
from recording.constants import RecordingState, compute_trim_offset
from recording.controllers.recording_orchestrator import (
    AttemptResult,
    RecordingOrchestrator,
)
from recording.factory import TrimmerFactory
from recording.interfaces.trimmer_interface import (
    FileDiscoveryError,
    RecordingError,
    TranscodeError,
    TrimmerInterface,
)

__all__ = [
    "AttemptResult",
    "FileDiscoveryError",
    "RecorderConfig",
    "RecordingError",
    "RecordingOrchestrator",
    "RecordingState",
    "TranscodeError",
    "TrimmerFactory",
    "TrimmerInterface",
    "compute_trim_offset",
]

"""
Recording Controllers Package

High-level controller that orchestrates the capture cycle.
"""

from recording.controllers.recording_orchestrator import (
    AttemptResult,
    RecordingOrchestrator,
)

# Public API
__all__ = [
    "AttemptResult",
    "RecordingOrchestrator",
]

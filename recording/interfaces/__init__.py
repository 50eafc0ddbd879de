"""
Recording Interfaces Package

Exposes abstract interfaces for recording components.
"""

from recording.interfaces.trimmer_interface import (
    FileDiscoveryError,
    RecordingError,
    TranscodeError,
    TrimmerInterface,
)

# Public API
__all__ = [
    # Exceptions
    "FileDiscoveryError",
    "RecordingError",
    "TranscodeError",
    # Interface
    "TrimmerInterface",
]

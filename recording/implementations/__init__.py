"""
Recording Implementations Package

Exposes concrete implementations of recording interfaces.
"""

from recording.implementations.ffmpeg_trimmer import FFmpegTrimmer
from recording.implementations.mock_trimmer import MockTrimmer

# Public API
__all__ = [
    "FFmpegTrimmer",
    "MockTrimmer",
]

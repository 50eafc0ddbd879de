"""
Recording Factory

Factory pattern for creating trimmer implementations.
Automatically selects real or mock trimming based on availability.
"""

import logging
from typing import Literal

from config.settings import (
    FFMPEG_PATH,
    TRIM_MAX_ATTEMPTS,
    TRIM_RETRY_DELAY_SECONDS,
)
from recording.implementations.ffmpeg_trimmer import FFmpegTrimmer
from recording.implementations.mock_trimmer import MockTrimmer
from recording.interfaces.trimmer_interface import TrimmerInterface

# Type alias for better type hints
TrimmerMode = Literal["auto", "real", "mock"]


class TrimmerFactory:
    """
    Factory for creating trimmer implementations.

    Usage:
        # Auto-detect (uses FFmpeg if available, mock otherwise)
        trimmer = TrimmerFactory.create_trimmer()

        # Log commands only (--no-video)
        trimmer = TrimmerFactory.create_trimmer(mode="mock")

        # Force real trimming (raises error if FFmpeg missing)
        trimmer = TrimmerFactory.create_trimmer(mode="real")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_trimmer(
        cls,
        mode: TrimmerMode = "auto",
        ffmpeg_path: str = FFMPEG_PATH,
        max_attempts: int = TRIM_MAX_ATTEMPTS,
        retry_delay: float = TRIM_RETRY_DELAY_SECONDS,
    ) -> TrimmerInterface:
        """
        Create a trimmer instance.

        Args:
            mode: "auto" (detect), "real" (force FFmpeg), "mock" (force mock)
            ffmpeg_path: FFmpeg binary for real trimming
            max_attempts: Attempts per file for real trimming
            retry_delay: Seconds between attempts for real trimming

        Returns:
            TrimmerInterface implementation

        Raises:
            RuntimeError: If mode="real" but FFmpeg not available
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Trimmer")
            return MockTrimmer()

        trimmer = FFmpegTrimmer(
            ffmpeg_path=ffmpeg_path,
            max_attempts=max_attempts,
            retry_delay=retry_delay,
        )

        if mode == "real":
            if not trimmer.is_available():
                raise RuntimeError(
                    f"Real trimming requested but FFmpeg not found: {ffmpeg_path}",
                )
            cls._logger.info("Creating FFmpeg Trimmer (forced)")
            return trimmer

        # mode == "auto" - try real first, fall back to mock
        if trimmer.is_available():
            cls._logger.info("Creating FFmpeg Trimmer (auto-detected)")
            return trimmer

        cls._logger.warning(
            f"FFmpeg not available ({ffmpeg_path}), using Mock Trimmer",
        )
        return MockTrimmer()

    @classmethod
    def is_ffmpeg_available(cls, ffmpeg_path: str = FFMPEG_PATH) -> bool:
        """Useful for diagnostics and configuration display."""
        return FFmpegTrimmer(ffmpeg_path=ffmpeg_path).is_available()

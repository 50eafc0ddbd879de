"""
Trimmer Interface

Abstract interface for trim implementations.
Defines the contract that any trimmer must follow.

High-level code (RecordingOrchestrator) depends on this abstraction, not
on FFmpeg directly, so tests can run the whole pipeline with MockTrimmer.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class TrimmerInterface(ABC):
    """
    Abstract base class for clip trimmers.

    Contract for trim(input, offset_ms, output):
    - offset_ms <= 0: input is renamed to output, content untouched
    - offset_ms > 0: the first offset_ms of input are dropped, no re-encode
    - success: input no longer exists (cleanup failures are only logged)
    - failure: TranscodeError is raised and input is left in place
    """

    @abstractmethod
    def trim(self, input_path: Path, offset_ms: int, output_path: Path) -> None:
        """
        Trim one raw capture file.

        Args:
            input_path: Raw capture file (owned by the trimmer from now on)
            offset_ms: Milliseconds to cut from the start
            output_path: Where the trimmed clip is written

        Raises:
            TranscodeError: All attempts failed; input_path is preserved

        Example:
            trimmer.trim(Path("Camera1.flv"), 3000, Path("Camera1.mp4"))
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the trimmer can run (e.g. ffmpeg installed).

        Returns:
            True if trim() can be used
        """
        pass


class RecordingError(Exception):
    """
    Base exception for recording pipeline errors.

    Examples:
    - No capture files after stop
    - FFmpeg failing on every attempt
    """
    pass


class FileDiscoveryError(RecordingError):
    """No raw capture files found after stopping the capture tool"""
    pass


class TranscodeError(RecordingError):
    """Trim failed (retries exhausted or transcoder missing)"""
    pass

"""
Mock Trimmer Implementation

Simulated trimming for tests and for --no-video runs.
Logs the FFmpeg command it would run and copies the capture content to
the output instead.

This is a "Fake" (test double) - it has working logic but no FFmpeg.
"""

import logging
import shutil
import threading
from pathlib import Path
from typing import List, Optional

from config.settings import FFMPEG_PATH
from recording.constants import build_trim_command
from recording.interfaces.trimmer_interface import TranscodeError, TrimmerInterface
from recording.utils.recording_utils import move_raw_file, remove_raw_file


class MockTrimmer(TrimmerInterface):
    """
    Mock trimmer for testing.

    Usage:
        trimmer = MockTrimmer()
        trimmer.trim(Path("Camera1.flv"), 3000, Path("Camera1.mp4"))
        assert trimmer.invocations[0]["offset_ms"] == 3000

        # Simulate a camera whose file stays locked
        trimmer.fail_for("Camera2.flv")
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()

        self.invocations: List[dict] = []

        # Test scenario configuration
        self._failing_inputs: set = set()
        self._fail_all = False

        self.logger.info("Mock Trimmer initialized")

    def is_available(self) -> bool:
        return True

    def trim(self, input_path: Path, offset_ms: int, output_path: Path) -> None:
        input_path = Path(input_path)
        output_path = Path(output_path)

        command: Optional[list[str]] = None
        if offset_ms > 0:
            command = build_trim_command(input_path, output_path, offset_ms, FFMPEG_PATH)

        with self._lock:
            self.invocations.append({
                "input": input_path,
                "offset_ms": offset_ms,
                "output": output_path,
                "command": command,
            })

        if self._fail_all or input_path.name in self._failing_inputs:
            self.logger.info(f"[MOCK] Simulated trim failure for {input_path.name}")
            raise TranscodeError(f"[MOCK] Simulated trim failure for {input_path.name}")

        if not input_path.exists():
            raise TranscodeError(f"Raw capture not found: {input_path}")

        if command is None:
            self.logger.info(f"[MOCK] Renaming {input_path.name} -> {output_path.name}")
            try:
                move_raw_file(input_path, output_path)
            except OSError as e:
                raise TranscodeError(f"Failed to rename {input_path.name}: {e}") from e
            return

        self.logger.info(f"[MOCK] Would execute: {' '.join(command)}")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(input_path, output_path)
        remove_raw_file(input_path)

    # =========================================================================
    # TEST HELPERS
    # =========================================================================

    def fail_for(self, filename: str) -> None:
        """Make trims of this input filename fail."""
        self._failing_inputs.add(filename)

    def fail_all(self, should_fail: bool = True) -> None:
        self._fail_all = should_fail

    @property
    def call_count(self) -> int:
        return len(self.invocations)

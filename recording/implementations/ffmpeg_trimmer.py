"""
FFmpeg Trimmer Implementation

Real trimming using an FFmpeg subprocess in stream-copy mode.

Right after OBS stops, capture files may still be locked or partially
flushed, so every operation runs under a bounded retry policy. Each
attempt is a full, fresh FFmpeg run.
"""

import logging
import shutil
import subprocess
import time
from pathlib import Path
from typing import Callable, Optional

from config.settings import (
    FFMPEG_PATH,
    FFMPEG_TIMEOUT_SECONDS,
    TRIM_MAX_ATTEMPTS,
    TRIM_RETRY_DELAY_SECONDS,
)
from core.retry import RetryPolicy, call_with_retry
from recording.constants import FFMPEG_STDERR_TAIL_LINES, build_trim_command
from recording.interfaces.trimmer_interface import TranscodeError, TrimmerInterface
from recording.utils.recording_utils import move_raw_file, remove_raw_file

CommandRunner = Callable[[list[str]], subprocess.CompletedProcess]


class FFmpegTrimmer(TrimmerInterface):
    """
    Trimmer using FFmpeg.

    Usage:
        trimmer = FFmpegTrimmer()
        trimmer.trim(Path("Camera1.flv"), 3000, Path("Camera1.mp4"))

    Tests inject runner (command -> CompletedProcess) and sleep to avoid
    real processes and real delays.
    """

    def __init__(
        self,
        ffmpeg_path: str = FFMPEG_PATH,
        max_attempts: int = TRIM_MAX_ATTEMPTS,
        retry_delay: float = TRIM_RETRY_DELAY_SECONDS,
        timeout: float = FFMPEG_TIMEOUT_SECONDS,
        runner: Optional[CommandRunner] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize FFmpeg trimmer.

        Args:
            ffmpeg_path: FFmpeg binary (name on PATH or absolute path)
            max_attempts: Attempts per file before giving up
            retry_delay: Seconds between attempts
            timeout: Seconds one FFmpeg run may take
            runner: Command runner (defaults to subprocess.run)
            sleep: Pause function used between attempts
        """
        self.logger = logging.getLogger(__name__)

        self.ffmpeg_path = ffmpeg_path
        self.timeout = timeout
        self.retry_policy = RetryPolicy(
            max_attempts=max_attempts,
            delay_seconds=retry_delay,
            sleep=sleep,
        )
        self._runner = runner or self._run_subprocess

        self.logger.info(
            f"FFmpeg Trimmer initialized "
            f"(binary: {ffmpeg_path}, attempts: {max_attempts}, "
            f"delay: {retry_delay:g}s)",
        )

    def is_available(self) -> bool:
        return shutil.which(self.ffmpeg_path) is not None

    def trim(self, input_path: Path, offset_ms: int, output_path: Path) -> None:
        input_path = Path(input_path)
        output_path = Path(output_path)

        if not input_path.exists():
            raise TranscodeError(f"Raw capture not found: {input_path}")

        output_path.parent.mkdir(parents=True, exist_ok=True)

        if offset_ms <= 0:
            self._rename(input_path, output_path)
            return

        command = build_trim_command(
            input_path,
            output_path,
            offset_ms,
            ffmpeg_path=self.ffmpeg_path,
        )
        self.logger.info(f"Executing trim command: {' '.join(command)}")

        try:
            call_with_retry(
                lambda: self._run_once(command, output_path),
                self.retry_policy,
                retry_on=(TranscodeError,),
                description=f"Trim of {input_path.name}",
            )
        except TranscodeError as e:
            raise TranscodeError(
                f"Failed to trim {input_path.name} after "
                f"{self.retry_policy.max_attempts} attempts: {e}",
            ) from e
        except FileNotFoundError as e:
            raise TranscodeError(
                f"FFmpeg not found ({self.ffmpeg_path}). Install ffmpeg or set FFMPEG_PATH",
            ) from e

        self.logger.info(f"Trimmed {input_path.name} -> {output_path.name}")
        remove_raw_file(input_path)

    def _rename(self, input_path: Path, output_path: Path) -> None:
        """No usable offset: keep the capture as-is under its new name."""
        self.logger.info(
            f"No trim needed, renaming {input_path.name} -> {output_path.name}",
        )
        try:
            call_with_retry(
                lambda: move_raw_file(input_path, output_path),
                self.retry_policy,
                retry_on=(OSError,),
                description=f"Rename of {input_path.name}",
            )
        except OSError as e:
            raise TranscodeError(f"Failed to rename {input_path.name}: {e}") from e

    def _run_once(self, command: list[str], output_path: Path) -> None:
        try:
            result = self._runner(command)
        except subprocess.TimeoutExpired as e:
            self._discard_partial(output_path)
            raise TranscodeError(f"FFmpeg timed out after {e.timeout}s") from e

        if result.returncode != 0:
            self._discard_partial(output_path)
            raise TranscodeError(
                f"FFmpeg exited with code {result.returncode}"
                f"{self._stderr_tail(result.stderr)}",
            )

        if not output_path.exists():
            raise TranscodeError(f"FFmpeg reported success but {output_path.name} is missing")

    def _run_subprocess(self, command: list[str]) -> subprocess.CompletedProcess:
        # stdin=DEVNULL: ffmpeg must never wait for keyboard input
        return subprocess.run(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            timeout=self.timeout,
            check=False,
        )

    def _discard_partial(self, output_path: Path) -> None:
        if output_path.exists():
            try:
                output_path.unlink()
            except OSError as e:
                self.logger.warning(f"Could not remove partial output {output_path}: {e}")

    @staticmethod
    def _stderr_tail(stderr) -> str:
        if not stderr:
            return ""
        if isinstance(stderr, bytes):
            stderr = stderr.decode("utf-8", errors="ignore")
        lines = [line for line in stderr.strip().splitlines() if line.strip()]
        if not lines:
            return ""
        return ": " + " | ".join(lines[-FFMPEG_STDERR_TAIL_LINES:])

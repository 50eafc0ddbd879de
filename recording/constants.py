"""
Recording Constants

Enums and FFmpeg command construction for the trim pipeline.
Tunable values (lead time, settle delay, retry limits) live in
config/settings.py.
"""

from enum import Enum
from pathlib import Path
from typing import Union

from config.settings import FFMPEG_PATH

# =============================================================================
# RECORDING STATES
# =============================================================================


class RecordingState(Enum):
    """Orchestrator states: IDLE -> ARMED -> TRIMMING -> IDLE"""

    IDLE = "idle"  # Waiting for an attempt
    ARMED = "armed"  # Capture tool recording the attempt
    TRIMMING = "trimming"  # Stop received, clips being processed


# =============================================================================
# FFMPEG TRIM CONFIGURATION
# =============================================================================

# Copy compressed streams as-is (no re-encode)
STREAM_COPY_ARGS = ["-c", "copy"]

# Move the moov atom to the front so browsers can start playback at once
FASTSTART_ARGS = ["-movflags", "+faststart"]

# Lines of ffmpeg stderr kept in error messages
FFMPEG_STDERR_TAIL_LINES = 5


def format_seek_seconds(offset_ms: int) -> str:
    """
    Render a millisecond offset as an ffmpeg seek value.

    Example:
        format_seek_seconds(3000)  # "3"
        format_seek_seconds(3500)  # "3.5"
        format_seek_seconds(1234567)  # "1234.567"
    """
    seconds, millis = divmod(int(offset_ms), 1000)
    if not millis:
        return str(seconds)
    return f"{seconds}.{millis:03d}".rstrip("0")


def build_trim_command(
    input_file: Union[str, Path],
    output_file: Union[str, Path],
    offset_ms: int,
    ffmpeg_path: str = FFMPEG_PATH,
) -> list[str]:
    """
    Generate FFmpeg command for a lossless trim.

    Seeks offset_ms into the input (input-side seek, so no decoding up to
    the cut) and stream-copies the rest into a fast-start container.

    Args:
        input_file: Raw capture file
        output_file: Trimmed output file
        offset_ms: Milliseconds to skip; <= 0 means no seek
        ffmpeg_path: FFmpeg binary

    Returns:
        List of command arguments for subprocess

    Example:
        build_trim_command("Camera1.flv", "Camera1.mp4", 3000)
        # ["ffmpeg", "-y", "-ss", "3", "-i", "Camera1.flv", "-c", "copy",
        #  "-movflags", "+faststart", "Camera1.mp4"]
    """
    command = [ffmpeg_path, "-y"]

    if offset_ms > 0:
        command.extend(["-ss", format_seek_seconds(offset_ms)])

    command.extend(["-i", str(input_file)])
    command.extend(STREAM_COPY_ARGS)
    command.extend(FASTSTART_ARGS)
    command.append(str(output_file))

    return command


def compute_trim_offset(start_time_ms: int, stop_time_ms: int, lead_ms: int) -> int:
    """
    Milliseconds to cut from the start of a capture.

    Keeps lead_ms of pre-roll before the decision. A missing start
    (start_time_ms <= 0) means the timing data cannot be trusted, so
    nothing is cut.

    Example:
        compute_trim_offset(1000, 9000, 5000)  # 3000
        compute_trim_offset(0, 9000, 5000)     # 0
    """
    if start_time_ms <= 0:
        return 0
    return max(0, stop_time_ms - start_time_ms - lead_ms)

"""
Recording Utilities

Shared utility functions for the trim pipeline: capture file discovery,
camera naming and raw file handling.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional

from config.settings import CAMERA_MARKER, RAW_CAPTURE_EXTENSION, TRIMMED_EXTENSION
from recording.interfaces.trimmer_interface import FileDiscoveryError

logger = logging.getLogger(__name__)


def is_capture_file(path: Path, extension: str = RAW_CAPTURE_EXTENSION) -> bool:
    """
    Check whether a file is a raw camera capture.

    Example:
        is_capture_file(Path("Camera1.flv"))      # True
        is_capture_file(Path("Camera1.mp4"))      # False (trimmed output)
        is_capture_file(Path("Replay.flv"))       # False (no camera marker)
    """
    return (
        path.is_file()
        and path.name.lower().endswith(extension.lower())
        and CAMERA_MARKER in path.name
    )


def discover_capture_files(
    capture_dir: Path,
    extension: str = RAW_CAPTURE_EXTENSION,
) -> list[Path]:
    """
    Find raw camera captures left by the capture tool.

    Args:
        capture_dir: Directory OBS records into
        extension: Raw capture extension (e.g. ".flv")

    Returns:
        Capture files sorted by name (stable camera order)

    Raises:
        FileDiscoveryError: Directory unreadable or no capture found
    """
    try:
        entries = list(Path(capture_dir).iterdir())
    except OSError as e:
        raise FileDiscoveryError(
            f"Failed to read captures directory {capture_dir}: {e}",
        ) from e

    files = sorted(
        (path for path in entries if is_capture_file(path, extension)),
        key=lambda path: path.name,
    )

    if not files:
        raise FileDiscoveryError(
            f"No camera files found in captures directory {capture_dir}",
        )

    logger.info(f"Discovered {len(files)} capture file(s): {[f.name for f in files]}")
    return files


def camera_index_from_path(path: Path) -> str:
    """
    Extract the camera index from a capture filename.

    The index is whatever follows the last "Camera" marker.

    Example:
        camera_index_from_path(Path("Camera2.flv"))        # "2"
        camera_index_from_path(Path("CameraX.raw"))        # "X"
        camera_index_from_path(Path("obs Camera 3.flv"))   # "3"
    """
    name = Path(path).name
    position = name.rfind(CAMERA_MARKER)
    if position == -1:
        return Path(name).stem
    remainder = name[position + len(CAMERA_MARKER):]
    return Path(remainder).stem.strip()


def trimmed_path_for(
    capture_dir: Path,
    camera_index: str,
    extension: str = TRIMMED_EXTENSION,
) -> Path:
    """
    Intermediate trimmed file of one camera.

    Example:
        trimmed_path_for(Path("Captures"), "1")  # Captures/Camera1.mp4
    """
    return Path(capture_dir) / f"{CAMERA_MARKER}{camera_index}{extension}"


def move_raw_file(source: Path, destination: Path) -> None:
    """
    Rename a raw capture without touching its content.

    Overwrites a stale destination left by a previous attempt.

    Raises:
        OSError: If the file cannot be moved
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    try:
        os.replace(source, destination)
    except OSError as e:
        # Different filesystem: os.replace cannot cross devices
        if not source.exists() or source.parent.resolve() == destination.parent.resolve():
            raise
        logger.debug(f"os.replace failed ({e}), falling back to shutil.move")
        if destination.exists():
            destination.unlink()
        shutil.move(str(source), str(destination))


def remove_raw_file(path: Path) -> bool:
    """
    Delete a consumed raw capture. Best-effort: failures are only logged.

    Returns:
        True if the file is gone
    """
    try:
        path.unlink()
        logger.debug(f"Removed raw capture: {path.name}")
        return True
    except FileNotFoundError:
        return True
    except OSError as e:
        logger.warning(f"Failed to remove source file {path}: {e}")
        return False


def keep_failed_capture(path: Path, failed_dir: Path, prefix: str) -> Optional[Path]:
    """
    Move an unprocessed capture out of the discovery directory.

    The capture keeps its content and gains the attempt prefix, so it can
    be trimmed by hand later but is never picked up by another attempt.

    Example:
        keep_failed_capture(
            Path("Captures/Camera2.flv"),
            Path("Captures/failed"),
            "2025-03-01_14h05m09s_Jane_Doe_SNATCH_attempt1",
        )
        # Captures/failed/2025-03-01_14h05m09s_Jane_Doe_SNATCH_attempt1_Camera2.flv

    Returns:
        New location, or None if the file could not be moved
    """
    destination = Path(failed_dir) / f"{prefix}_{path.name}"
    counter = 1
    while destination.exists():
        destination = Path(failed_dir) / f"{prefix}_{counter}_{path.name}"
        counter += 1

    try:
        move_raw_file(path, destination)
    except OSError as e:
        logger.error(f"Failed to set aside capture {path}: {e}")
        return None

    logger.warning(f"Kept unprocessed capture: {destination}")
    return destination

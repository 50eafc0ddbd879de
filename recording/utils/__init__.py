"""
Recording Utilities Package

Exposes shared utility functions for the trim pipeline.
"""

from recording.utils.recording_utils import (
    camera_index_from_path,
    discover_capture_files,
    is_capture_file,
    keep_failed_capture,
    move_raw_file,
    remove_raw_file,
    trimmed_path_for,
)

# Public API
__all__ = [
    "camera_index_from_path",
    "discover_capture_files",
    "is_capture_file",
    "keep_failed_capture",
    "move_raw_file",
    "remove_raw_file",
    "trimmed_path_for",
]

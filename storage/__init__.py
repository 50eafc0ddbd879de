"""
Storage Module

Files trimmed clips into per-session directories under the video root.

Public API:
    - FileOrganizer: Naming and placement of finished clips
    - ArtifactStorageInterface: Storage contract
    - PlacementPolicy: MOVE or COPY
    - StorageError: Custom exception

Usage:
    from storage import FileOrganizer

    organizer = FileOrganizer(Path("videos"))
    organizer.place(state, "1", Path("Captures/Camera1.mp4"), timestamp)
"""

from storage.constants import PlacementPolicy
from storage.interfaces.storage_interface import (
    ArtifactStorageInterface,
    StorageError,
)
from storage.managers.file_organizer import FileOrganizer, format_attempt_timestamp

__all__ = [
    "ArtifactStorageInterface",
    "FileOrganizer",
    "PlacementPolicy",
    "StorageError",
    "format_attempt_timestamp",
]

"""
File Organizer

Files trimmed clips into the session tree.
Single responsibility: naming and placement only, no state between attempts.

Layout:
    <video_root>/<session>/<timestamp>_<athlete>_<lift>_attempt<N>_Camera<index>.mp4
"""

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Tuple

from config.settings import ATTEMPT_TIMESTAMP_FORMAT, CAMERA_MARKER
from core.state_store import AttemptState
from storage.constants import PlacementPolicy
from storage.interfaces.storage_interface import (
    ArtifactStorageInterface,
    StorageError,
)
from storage.utils.path_utils import (
    ensure_directory,
    sanitize_name,
    session_directory_name,
)


def format_attempt_timestamp(timestamp: datetime) -> str:
    """
    Format the per-attempt timestamp.

    Example:
        format_attempt_timestamp(datetime(2025, 3, 1, 14, 5, 9))
        # "2025-03-01_14h05m09s"
    """
    return timestamp.strftime(ATTEMPT_TIMESTAMP_FORMAT)


class FileOrganizer(ArtifactStorageInterface):
    """
    Places trimmed clips under the video root.

    Usage:
        organizer = FileOrganizer(Path("videos"))
        timestamp = datetime.now()  # once per attempt
        paths = organizer.organize(state, [("1", trimmed1), ("2", trimmed2)], timestamp)
    """

    def __init__(
        self,
        video_root: Path,
        policy: PlacementPolicy = PlacementPolicy.MOVE,
    ):
        """
        Initialize file organizer.

        Args:
            video_root: Base directory of the session tree
            policy: MOVE consumes the trimmed file, COPY leaves it in place
        """
        self.logger = logging.getLogger(__name__)
        self.video_root = Path(video_root)
        self.policy = policy

        self.logger.info(
            f"File organizer initialized "
            f"(root: {self.video_root}, policy: {policy.value})",
        )

    def session_directory(self, session_name: str) -> Path:
        directory = self.video_root / session_directory_name(session_name)
        if not ensure_directory(directory):
            raise StorageError(f"Cannot create session directory: {directory}")
        return directory

    def final_filename(
        self,
        state: AttemptState,
        camera_index: str,
        timestamp: datetime,
        extension: str,
    ) -> str:
        """
        Build the final clip name.

        Example:
            final_filename(state, "1", ts, ".mp4")
            # "2025-03-01_14h05m09s_Jane_Doe_SNATCH_attempt1_Camera1.mp4"
        """
        if extension and not extension.startswith("."):
            extension = f".{extension}"

        return (
            f"{format_attempt_timestamp(timestamp)}"
            f"_{sanitize_name(state.athlete)}"
            f"_{state.lift_type.value}"
            f"_attempt{state.attempt_number}"
            f"_{CAMERA_MARKER}{camera_index}{extension}"
        )

    def final_path(
        self,
        state: AttemptState,
        camera_index: str,
        timestamp: datetime,
        extension: str,
    ) -> Path:
        directory = self.video_root / session_directory_name(state.session_name)
        return directory / self.final_filename(state, camera_index, timestamp, extension)

    def place(
        self,
        state: AttemptState,
        camera_index: str,
        trimmed_path: Path,
        timestamp: datetime,
    ) -> Path:
        trimmed_path = Path(trimmed_path)
        if not trimmed_path.exists():
            raise StorageError(f"Trimmed file not found: {trimmed_path}")

        self.session_directory(state.session_name)
        destination = self.final_path(
            state,
            camera_index,
            timestamp,
            trimmed_path.suffix,
        )

        # Final clips are immutable once written
        if destination.exists():
            raise StorageError(f"Clip already exists: {destination}")

        try:
            if self.policy == PlacementPolicy.COPY:
                shutil.copy2(trimmed_path, destination)
            else:
                shutil.move(str(trimmed_path), str(destination))
        except (OSError, shutil.Error) as e:
            raise StorageError(
                f"Failed to {self.policy.value} {trimmed_path.name}: {e}",
            ) from e

        verb = "Copied" if self.policy == PlacementPolicy.COPY else "Moved"
        self.logger.info(f"{verb} clip: {trimmed_path.name} -> {destination}")
        return destination

    def organize(
        self,
        state: AttemptState,
        trimmed_files: List[Tuple[str, Path]],
        timestamp: datetime,
    ) -> List[Path]:
        return [
            self.place(state, camera_index, path, timestamp)
            for camera_index, path in trimmed_files
        ]

"""
Storage Interface

Abstract interface for filing finished clips.
The orchestrator depends on this interface, not on the filesystem layout.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import List, Tuple

from core.state_store import AttemptState


class ArtifactStorageInterface(ABC):
    """
    Abstract base class for clip storage.

    Implementations decide where a trimmed clip lives and how it is named;
    they hold no state between attempts.
    """

    @abstractmethod
    def session_directory(self, session_name: str) -> Path:
        """
        Get (and create) the directory for a session.

        Raises:
            StorageError: If the directory cannot be created
        """

    @abstractmethod
    def final_path(
        self,
        state: AttemptState,
        camera_index: str,
        timestamp: datetime,
        extension: str,
    ) -> Path:
        """Compute the destination of one camera's clip (no side effects)."""

    @abstractmethod
    def place(
        self,
        state: AttemptState,
        camera_index: str,
        trimmed_path: Path,
        timestamp: datetime,
    ) -> Path:
        """
        File one trimmed clip.

        Returns:
            Final path of the clip

        Raises:
            StorageError: If the clip cannot be placed
        """

    @abstractmethod
    def organize(
        self,
        state: AttemptState,
        trimmed_files: List[Tuple[str, Path]],
        timestamp: datetime,
    ) -> List[Path]:
        """File every camera's clip of one attempt, in order."""


class StorageError(Exception):
    """Base exception for storage errors"""
    pass

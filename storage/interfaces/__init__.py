"""
Storage Interfaces Package
"""

from storage.interfaces.storage_interface import (
    ArtifactStorageInterface,
    StorageError,
)

__all__ = [
    "ArtifactStorageInterface",
    "StorageError",
]

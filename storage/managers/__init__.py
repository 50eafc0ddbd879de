"""
Storage Managers Package
"""

from storage.managers.file_organizer import FileOrganizer

__all__ = [
    "FileOrganizer",
]

"""
Storage Utilities Package
"""

from storage.utils.path_utils import (
    ensure_directory,
    safe_filename,
    sanitize_name,
    session_directory_name,
)

__all__ = [
    "ensure_directory",
    "safe_filename",
    "sanitize_name",
    "session_directory_name",
]

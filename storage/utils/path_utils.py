"""
Path Utilities

Helper functions for naming and directory operations.
"""

import logging
from pathlib import Path

from config.settings import UNSORTED_SESSION_DIR

logger = logging.getLogger(__name__)


def ensure_directory(path: Path, create: bool = True) -> bool:
    """
    Ensure directory exists.

    Args:
        path: Directory path
        create: If True, create if doesn't exist

    Returns:
        True if directory exists or was created

    Example:
        ensure_directory(Path("videos/Group_A"))
    """
    try:
        if path.exists():
            if not path.is_dir():
                logger.error(f"Path exists but is not a directory: {path}")
                return False
            return True

        if create:
            path.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Created directory: {path}")
            return True

        return False

    except OSError as e:
        logger.error(f"Failed to create directory {path}: {e}")
        return False


def safe_filename(filename: str) -> str:
    """
    Make filename safe by removing invalid characters.

    Args:
        filename: Original filename

    Returns:
        Safe filename

    Example:
        safe = safe_filename("video:with*bad?chars.mp4")
        # Returns: "video_with_bad_chars.mp4"
    """
    # Replace invalid characters with underscore
    invalid_chars = ['<', '>', ':', '"', '/', '\\', '|', '?', '*']
    safe = filename

    for char in invalid_chars:
        safe = safe.replace(char, '_')

    return safe


def sanitize_name(name: str) -> str:
    """
    Turn a display name into a filename component.

    Spaces become underscores; path separators and other characters
    invalid on Windows are replaced as well.

    Example:
        sanitize_name("Jane Doe")  # "Jane_Doe"
    """
    return safe_filename(name.strip().replace(" ", "_"))


def session_directory_name(session_name: str) -> str:
    """
    Directory name for a session.

    Example:
        session_directory_name("Group A")  # "Group_A"
        session_directory_name("")         # "unsorted"
    """
    sanitized = sanitize_name(session_name or "")
    if sanitized in ("", ".", ".."):
        return UNSORTED_SESSION_DIR
    return sanitized

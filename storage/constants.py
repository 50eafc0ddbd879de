"""
Storage Module Enums

Type definitions for the storage module.
Configuration values live in config/settings.py.
"""

from enum import Enum

# =============================================================================
# ENUMS
# =============================================================================


class PlacementPolicy(Enum):
    """How a trimmed clip reaches its session directory"""

    MOVE = "move"  # Trimmed intermediate is consumed
    COPY = "copy"  # Intermediate kept for a live-stream media source

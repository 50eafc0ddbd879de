"""
Status Constants

Phases pushed to the web interface while an attempt is processed.
"""

from enum import Enum


class StatusPhase(Enum):
    RECORDING = "recording"
    TRIMMING = "trimming"
    READY = "ready"

"""
Status Module

Phase notifications (recording, trimming, ready) for the web interface.

Usage:
    from status import LoggingStatusSink, StatusPhase

    sink = LoggingStatusSink()
    sink.send_status(StatusPhase.READY, "Videos ready")
"""

from status.constants import StatusPhase
from status.implementations import (
    CallbackStatusSink,
    LoggingStatusSink,
    MockStatusSink,
)
from status.interfaces import StatusSinkInterface

__all__ = [
    "CallbackStatusSink",
    "LoggingStatusSink",
    "MockStatusSink",
    "StatusPhase",
    "StatusSinkInterface",
]

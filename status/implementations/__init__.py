"""
Status Implementations Package
"""

from status.implementations.callback_sink import CallbackStatusSink
from status.implementations.logging_sink import LoggingStatusSink
from status.implementations.mock_sink import MockStatusSink

__all__ = [
    "CallbackStatusSink",
    "LoggingStatusSink",
    "MockStatusSink",
]

"""
Callback Status Sink

Forwards phase changes to a callable, e.g. the web interface's
broadcast function.
"""

import logging
from typing import Callable

from status.constants import StatusPhase
from status.interfaces.status_sink_interface import StatusSinkInterface


class CallbackStatusSink(StatusSinkInterface):
    """
    Usage:
        sink = CallbackStatusSink(lambda phase, msg: web.broadcast(phase.value, msg))
    """

    def __init__(self, callback: Callable[[StatusPhase, str], None]):
        self.logger = logging.getLogger(__name__)
        self.callback = callback

    def send_status(self, phase: StatusPhase, message: str) -> None:
        self.logger.debug(f"Forwarding status {phase.value}: {message}")
        self.callback(phase, message)

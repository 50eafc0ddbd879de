"""
Logging Status Sink

Default sink: writes every phase change to the service log.
"""

import logging

from status.constants import StatusPhase
from status.interfaces.status_sink_interface import StatusSinkInterface


class LoggingStatusSink(StatusSinkInterface):

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def send_status(self, phase: StatusPhase, message: str) -> None:
        self.logger.info(f"[{phase.value.upper()}] {message}")

"""
Mock Status Sink

Records every notification for assertions in tests.
"""

import threading
from typing import List, Tuple

from status.constants import StatusPhase
from status.interfaces.status_sink_interface import StatusSinkInterface


class MockStatusSink(StatusSinkInterface):

    def __init__(self, should_fail: bool = False):
        self._lock = threading.Lock()
        self.calls: List[Tuple[StatusPhase, str]] = []
        self.should_fail = should_fail

    def send_status(self, phase: StatusPhase, message: str) -> None:
        with self._lock:
            self.calls.append((phase, message))
        if self.should_fail:
            raise RuntimeError("[MOCK] Simulated status sink failure")

    @property
    def phases(self) -> List[StatusPhase]:
        with self._lock:
            return [phase for phase, _ in self.calls]

    def last_message(self) -> str:
        with self._lock:
            return self.calls[-1][1] if self.calls else ""

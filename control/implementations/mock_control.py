"""
Mock Control Client

Simulated capture-tool control channel for testing without OBS.
Records every triggered action and can be told to fail.
"""

import logging
import threading
from typing import Dict, List, Optional

from control.interfaces.control_client_interface import (
    ControlClientInterface,
    ControlConnectionError,
    RemoteError,
)


class MockControlClient(ControlClientInterface):
    """
    Mock control client for testing.

    Usage:
        client = MockControlClient()
        client.connect()
        client.trigger_action("OBS_KEY_F7")
        assert client.actions == ["OBS_KEY_F7"]

        # Simulate OBS rejecting the stop hotkey
        client.fail_action("OBS_KEY_F8", code=600, comment="No hotkey")
    """

    def __init__(self, auto_connect: bool = True):
        """
        Initialize mock control client.

        Args:
            auto_connect: If True, starts connected (no connect() needed)
        """
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._connected = auto_connect
        self.actions: List[str] = []
        self.connect_calls = 0

        # Test scenario configuration
        self._failures: Dict[str, RemoteError] = {}
        self._fail_connect = False
        self._drop_on: Optional[str] = None

        self.logger.info("[MOCK] Control client initialized")

    def connect(self) -> None:
        self.connect_calls += 1
        if self._fail_connect:
            raise ControlConnectionError("[MOCK] Simulated connection failure")
        self._connected = True
        self.logger.info("[MOCK] Connected")

    def trigger_action(self, action_id: str) -> None:
        with self._lock:
            if not self._connected:
                raise ControlConnectionError("[MOCK] Not connected")

            if self._drop_on == action_id:
                self._connected = False
                raise ControlConnectionError("[MOCK] Connection dropped")

            self.actions.append(action_id)
            failure = self._failures.get(action_id)

        if failure is not None:
            self.logger.info(f"[MOCK] {action_id} rejected: {failure.comment}")
            raise RemoteError(failure.code, failure.comment)

        self.logger.info(f"[MOCK] Triggered {action_id}")

    def is_connected(self) -> bool:
        return self._connected

    def close(self) -> None:
        self._connected = False

    # =========================================================================
    # TEST HELPERS
    # =========================================================================

    def fail_action(self, action_id: str, code: int = 600, comment: str = "Simulated failure") -> None:
        """Make every call of action_id answer with a failure status."""
        self._failures[action_id] = RemoteError(code, comment)

    def fail_connect(self, should_fail: bool = True) -> None:
        self._fail_connect = should_fail

    def drop_on(self, action_id: Optional[str]) -> None:
        """Drop the connection when action_id is triggered."""
        self._drop_on = action_id

    def disconnect(self) -> None:
        self._connected = False

    def reset(self) -> None:
        """Clear recorded actions and configured failures."""
        self.actions.clear()
        self._failures.clear()
        self._fail_connect = False
        self._drop_on = None

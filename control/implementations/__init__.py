"""
Control Implementations Package

Concrete control clients (OBS WebSocket and mock).
"""

from control.implementations.mock_control import MockControlClient
from control.implementations.obs_websocket_client import OBSWebSocketClient

__all__ = [
    "MockControlClient",
    "OBSWebSocketClient",
]

"""
Control Factory

Factory pattern for creating control client implementations.
Single place to decide between the real OBS client and the mock.
"""

import logging
from typing import Literal

from config.settings import OBS_WEBSOCKET_URL
from control.implementations.mock_control import MockControlClient
from control.implementations.obs_websocket_client import OBSWebSocketClient
from control.interfaces.control_client_interface import ControlClientInterface

ControlMode = Literal["real", "mock"]


class ControlFactory:
    """
    Factory for creating control clients.

    Usage:
        client = ControlFactory.create_client()                # OBS
        client = ControlFactory.create_client(mode="mock")     # tests
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_client(
        cls,
        mode: ControlMode = "real",
        url: str = OBS_WEBSOCKET_URL,
    ) -> ControlClientInterface:
        """
        Create a control client.

        Unlike capture, there is no auto mode: whether OBS is reachable is
        only known after connect(), which the caller controls.

        Raises:
            ValueError: If mode is unknown
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Control Client")
            return MockControlClient()

        if mode == "real":
            cls._logger.info(f"Creating OBS WebSocket Client ({url})")
            return OBSWebSocketClient(url=url)

        raise ValueError(f"Unknown control mode: {mode}")

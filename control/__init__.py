"""
Control Module

Remote control of the capture tool (OBS Studio) over its WebSocket API.

Public API:
    - ControlFactory: Factory for creating control clients
    - ControlClientInterface: Control contract
    - ControlAction: Logical actions (reset, start, stop)
    - ControlError, ControlConnectionError, RemoteError: Exceptions

Usage:
    from control import ControlFactory

    client = ControlFactory.create_client()
    client.connect()
    client.trigger_action("OBS_KEY_F7")
"""

from control.constants import DEFAULT_HOTKEYS, ControlAction
from control.factory import ControlFactory
from control.interfaces.control_client_interface import (
    ControlClientInterface,
    ControlConnectionError,
    ControlError,
    RemoteError,
)

__all__ = [
    "DEFAULT_HOTKEYS",
    "ControlAction",
    "ControlClientInterface",
    "ControlConnectionError",
    "ControlError",
    "ControlFactory",
    "RemoteError",
]

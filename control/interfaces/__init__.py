"""
Control Interfaces Package

Exposes the abstract control client and its exceptions.
"""

from control.interfaces.control_client_interface import (
    ControlClientInterface,
    ControlConnectionError,
    ControlError,
    RemoteError,
)

# Public API
__all__ = [
    "ControlClientInterface",
    # Exceptions
    "ControlConnectionError",
    "ControlError",
    "RemoteError",
]

"""
Control Client Interface

Abstract interface for the capture tool's remote-control channel.

The orchestrator depends on this abstraction, not on OBS directly, so the
whole recording pipeline can run against MockControlClient in tests.
"""

from abc import ABC, abstractmethod


class ControlClientInterface(ABC):
    """
    Abstract base class for capture-tool control clients.

    One primitive: trigger a named action (an OBS hotkey id) and wait for
    the tool to acknowledge it.
    """

    @abstractmethod
    def connect(self) -> None:
        """
        Open the control channel and complete the identify handshake.

        Raises:
            ControlConnectionError: If the tool is unreachable or the
                handshake does not complete in time
        """

    @abstractmethod
    def trigger_action(self, action_id: str) -> None:
        """
        Trigger an action and block until the tool answers.

        Args:
            action_id: Key identifier of the action (e.g. "OBS_KEY_F7")

        Raises:
            RemoteError: The tool rejected the request
            ControlConnectionError: Channel down, dropped or timed out
        """

    @abstractmethod
    def is_connected(self) -> bool:
        """True while the channel is open and identified."""

    @abstractmethod
    def close(self) -> None:
        """Close the channel. Safe to call more than once."""


class ControlError(Exception):
    """
    Base exception for control channel errors.

    Examples:
    - OBS not running
    - Handshake timeout
    - Hotkey request rejected
    """
    pass


class ControlConnectionError(ControlError):
    """Control channel unreachable, dropped, or not answering"""
    pass


class RemoteError(ControlError):
    """The capture tool answered a request with a failure status"""

    def __init__(self, code: int, comment: str = ""):
        self.code = code
        self.comment = comment
        super().__init__(f"Request failed with code {code}: {comment or 'no detail'}")

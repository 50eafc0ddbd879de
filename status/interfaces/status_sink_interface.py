"""
Status Sink Interface

Push-only notification of phase changes, consumed by the web interface.

Sinks are fire-and-forget from the orchestrator's point of view: the
orchestrator logs and ignores anything a sink raises.
"""

from abc import ABC, abstractmethod

from status.constants import StatusPhase


class StatusSinkInterface(ABC):
    """Abstract base class for status notification targets."""

    @abstractmethod
    def send_status(self, phase: StatusPhase, message: str) -> None:
        """
        Publish a phase change.

        Args:
            phase: New phase (RECORDING, TRIMMING, READY)
            message: Human-readable detail shown to operators
        """

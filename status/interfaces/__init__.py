"""
Status Interfaces Package
"""

from status.interfaces.status_sink_interface import StatusSinkInterface

__all__ = [
    "StatusSinkInterface",
]

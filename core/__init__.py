"""
Core utilities and modules.

Public API:
    - StateStore / AttemptState / LiftType: Shared attempt state
    - RetryPolicy / call_with_retry: Bounded retry helper
    - EventDispatcher / ControlFileEventSource: Timing event delivery

Usage:
    from core import StateStore

    store = StateStore()
    store.set_session("Group A")
"""

from core.events import (
    AttemptStart,
    ControlFileEventSource,
    DecisionGiven,
    EventDispatcher,
    EventParseError,
    ForceStop,
    SessionChanged,
    StatusRequest,
    parse_command,
)
from core.retry import RetryPolicy, call_with_retry
from core.state_store import AttemptState, LiftType, StateStore

__all__ = [
    "AttemptStart",
    "AttemptState",
    "ControlFileEventSource",
    "DecisionGiven",
    "EventDispatcher",
    "EventParseError",
    "ForceStop",
    "LiftType",
    "RetryPolicy",
    "SessionChanged",
    "StateStore",
    "StatusRequest",
    "call_with_retry",
    "parse_command",
]

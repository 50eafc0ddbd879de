"""
Attempt State Store

Process-wide record of the attempt currently in flight.

The event-delivery path writes it and the trim worker reads it, so every
access goes through one lock. Callers never see the live record, only
immutable snapshots.
"""

import logging
import threading
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Optional


class LiftType(str, Enum):
    """Lift types reported by the scoring system."""

    SNATCH = "SNATCH"
    CLEANJERK = "CLEANJERK"

    @classmethod
    def parse(cls, value) -> "LiftType":
        """
        Convert a scoring-system key into a LiftType.

        Accepts enum members or strings in any case ("snatch", "CLEANJERK").

        Raises:
            ValueError: If value is not a known lift type
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown lift type: {value!r}") from None


@dataclass(frozen=True)
class AttemptState:
    """
    Snapshot of the in-flight attempt.

    start_time_ms == 0 means no valid start was captured.
    stop_time_ms == 0 means no decision has arrived yet.
    """

    athlete: str = ""
    lift_type: LiftType = LiftType.SNATCH
    attempt_number: int = 1
    session_name: str = ""
    start_time_ms: int = 0
    stop_time_ms: int = 0

    @property
    def descriptor(self) -> str:
        """Human-readable attempt label, e.g. 'Jane Doe - SNATCH attempt 1'"""
        athlete = self.athlete.replace("_", " ")
        return f"{athlete} - {self.lift_type.value} attempt {self.attempt_number}"

    @property
    def has_valid_start(self) -> bool:
        return self.start_time_ms > 0


_FIELD_NAMES = frozenset(f.name for f in fields(AttemptState))


class StateStore:
    """
    Thread-safe holder of the single AttemptState.

    Usage:
        store = StateStore()
        store.update(session_name="Group A")
        snapshot = store.get()
    """

    def __init__(self, initial: Optional[AttemptState] = None):
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._state = initial or AttemptState()

    def get(self) -> AttemptState:
        """Return the current snapshot."""
        with self._lock:
            return self._state

    def update(self, **changes) -> AttemptState:
        """
        Atomically apply field changes and return the new snapshot.

        Args:
            **changes: AttemptState field names and their new values

        Raises:
            AttributeError: If a field name is unknown
            ValueError: If a value violates the attempt invariants
        """
        unknown = set(changes) - _FIELD_NAMES
        if unknown:
            raise AttributeError(f"Unknown attempt fields: {sorted(unknown)}")

        if "lift_type" in changes:
            changes["lift_type"] = LiftType.parse(changes["lift_type"])
        if "attempt_number" in changes and int(changes["attempt_number"]) < 1:
            raise ValueError(
                f"Attempt number must be positive: {changes['attempt_number']}",
            )

        with self._lock:
            self._state = replace(self._state, **changes)
            new_state = self._state

        self.logger.debug(f"Attempt state updated: {changes}")
        return new_state

    def begin_attempt(
        self,
        athlete: str,
        lift_type,
        attempt_number: int,
        start_time_ms: int,
    ) -> AttemptState:
        """Record a new attempt start and clear any stale stop time."""
        return self.update(
            athlete=athlete,
            lift_type=lift_type,
            attempt_number=int(attempt_number),
            start_time_ms=max(0, int(start_time_ms)),
            stop_time_ms=0,
        )

    def record_stop(self, stop_time_ms: int) -> AttemptState:
        return self.update(stop_time_ms=int(stop_time_ms))

    def set_session(self, name: str) -> AttemptState:
        return self.update(session_name=(name or "").strip())

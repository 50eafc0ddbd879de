"""
Timing Events

Typed events delivered by the scoring system, a dispatcher that routes
them to the orchestrator, and a file-based event source for operators.

The real transport (MQTT from the scoring system) lives outside this
repository; anything that can build these events can call
EventDispatcher.dispatch().
"""

import logging
import shlex
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from core.state_store import LiftType, StateStore


@dataclass(frozen=True)
class AttemptStart:
    athlete: str
    lift_type: LiftType
    attempt_number: int
    start_time_ms: int


@dataclass(frozen=True)
class DecisionGiven:
    stop_time_ms: int


@dataclass(frozen=True)
class SessionChanged:
    name: str


@dataclass(frozen=True)
class ForceStop:
    """Operator request to stop capture without trimming."""


@dataclass(frozen=True)
class StatusRequest:
    """Operator request to log the orchestrator status."""


TimingEvent = Union[AttemptStart, DecisionGiven, SessionChanged, ForceStop, StatusRequest]


class EventParseError(ValueError):
    """Control command could not be turned into an event"""
    pass


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_command(line: str) -> TimingEvent:
    """
    Parse one control-file command into an event.

    Commands:
        START <athlete> <LIFT> <attempt> [start_ms]
        DECISION [stop_ms]
        SESSION <name...>
        FORCESTOP
        STATUS

    Athlete names containing spaces must be quoted or use underscores.
    Missing timestamps default to the current time.

    Raises:
        EventParseError: If the command is unknown or malformed
    """
    try:
        parts = shlex.split(line)
    except ValueError as e:
        raise EventParseError(f"Malformed command {line!r}: {e}") from e

    if not parts:
        raise EventParseError("Empty command")

    command, args = parts[0].upper(), parts[1:]

    try:
        if command == "START":
            if len(args) not in (3, 4):
                raise EventParseError(
                    "START expects: <athlete> <LIFT> <attempt> [start_ms]",
                )
            start_ms = int(args[3]) if len(args) == 4 else now_ms()
            return AttemptStart(
                athlete=args[0],
                lift_type=LiftType.parse(args[1]),
                attempt_number=int(args[2]),
                start_time_ms=start_ms,
            )

        if command == "DECISION":
            if len(args) > 1:
                raise EventParseError("DECISION expects: [stop_ms]")
            return DecisionGiven(int(args[0]) if args else now_ms())

        if command == "SESSION":
            return SessionChanged(" ".join(args))

        if command == "FORCESTOP":
            return ForceStop()

        if command == "STATUS":
            return StatusRequest()

    except ValueError as e:
        if isinstance(e, EventParseError):
            raise
        raise EventParseError(f"Invalid argument in {line!r}: {e}") from e

    raise EventParseError(f"Unknown command: {command}")


class EventDispatcher:
    """
    Routes timing events to the state store and the orchestrator.

    Usage:
        dispatcher = EventDispatcher(store, orchestrator)
        dispatcher.dispatch(SessionChanged("Group A"))
        dispatcher.dispatch(AttemptStart("Jane Doe", LiftType.SNATCH, 1, 1000))
        dispatcher.dispatch(DecisionGiven(9000))
    """

    def __init__(self, state_store: StateStore, orchestrator):
        self.logger = logging.getLogger(__name__)
        self.state_store = state_store
        self.orchestrator = orchestrator

    def dispatch(self, event: TimingEvent) -> bool:
        """
        Deliver one event.

        Returns:
            True if the event was accepted by its handler
        """
        self.logger.debug(f"Dispatching {event}")

        if isinstance(event, SessionChanged):
            self.state_store.set_session(event.name)
            self.logger.info(f"Session set to: {event.name or '(none)'}")
            return True

        if isinstance(event, AttemptStart):
            return self.orchestrator.on_attempt_start(
                event.athlete,
                event.lift_type,
                event.attempt_number,
                event.start_time_ms,
            )

        if isinstance(event, DecisionGiven):
            return self.orchestrator.on_decision(event.stop_time_ms)

        if isinstance(event, ForceStop):
            self.orchestrator.force_stop()
            return True

        if isinstance(event, StatusRequest):
            self.logger.info(f"Status: {self.orchestrator.get_status()}")
            return True

        self.logger.warning(f"Unhandled event type: {type(event).__name__}")
        return False


class ControlFileEventSource:
    """
    Polls a control file for operator commands.

    Simple: echo "DECISION" > /tmp/replays_control.cmd
    The file is deleted as soon as it has been read.
    """

    def __init__(
        self,
        dispatcher: EventDispatcher,
        control_file: Union[str, Path],
        poll_interval: float = 0.1,
    ):
        self.logger = logging.getLogger(__name__)
        self.dispatcher = dispatcher
        self.control_file = Path(control_file)
        self.poll_interval = poll_interval

        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    def poll_once(self) -> bool:
        """
        Process the control file if present.

        Returns:
            True if a command was read (valid or not)
        """
        if not self.control_file.exists():
            return False

        try:
            text = self.control_file.read_text()
            self.control_file.unlink()
        except OSError as e:
            self.logger.error(f"Failed to read control file: {e}")
            return False

        for line in text.splitlines():
            line = line.strip()
            if not line:
                continue
            self.logger.info(f"Remote command received: {line}")
            try:
                event = parse_command(line)
            except EventParseError as e:
                self.logger.warning(f"Ignoring control command: {e}")
                continue
            try:
                self.dispatcher.dispatch(event)
            except Exception as e:
                # Never let one bad command stop the poll loop
                self.logger.error(f"Error handling {line!r}: {e}", exc_info=True)

        return True

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_worker,
            daemon=True,
            name="ControlFilePoller",
        )
        self._thread.start()
        self.logger.info(f"Watching control file: {self.control_file}")

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=2.0)
        self._thread = None

    def _poll_worker(self) -> None:
        while not self._stop_event.wait(self.poll_interval):
            self.poll_once()

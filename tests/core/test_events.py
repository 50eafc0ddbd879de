"""
Timing Event Tests

Tests for command parsing, event dispatch and the control-file source.

To run:
    pytest tests/core/test_events.py -v
"""

import time
from unittest.mock import patch

import pytest

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
from core.state_store import LiftType

# =============================================================================
# PARSING TESTS
# =============================================================================


@pytest.mark.unit
def test_parse_start_with_timestamp():
    """Test a full START command."""
    event = parse_command('START "Jane Doe" snatch 1 1000')

    assert event == AttemptStart("Jane Doe", LiftType.SNATCH, 1, 1000)


@pytest.mark.unit
def test_parse_start_defaults_to_now():
    """Test START without timestamp uses the receive time."""
    with patch("core.events.now_ms", return_value=123456):
        event = parse_command("START Jane_Doe CLEANJERK 3")

    assert event.start_time_ms == 123456
    assert event.athlete == "Jane_Doe"


@pytest.mark.unit
def test_parse_decision():
    """Test DECISION with and without timestamp."""
    assert parse_command("DECISION 9000") == DecisionGiven(9000)

    with patch("core.events.now_ms", return_value=42):
        assert parse_command("decision") == DecisionGiven(42)


@pytest.mark.unit
def test_parse_session_joins_words():
    """Test unquoted session names keep their spaces."""
    assert parse_command("SESSION Group A") == SessionChanged("Group A")
    assert parse_command("SESSION") == SessionChanged("")


@pytest.mark.unit
def test_parse_simple_commands():
    """Test argument-less commands."""
    assert parse_command("FORCESTOP") == ForceStop()
    assert parse_command("status") == StatusRequest()


@pytest.mark.unit
@pytest.mark.parametrize(
    "line",
    [
        "",
        "JUMP",
        "START Jane SNATCH",
        "START Jane DEADLIFT 1",
        "START Jane SNATCH one",
        "DECISION soon",
        "DECISION 1 2",
        'START "Jane SNATCH 1',
    ],
)
def test_parse_invalid_commands(line):
    """Test malformed commands raise EventParseError."""
    with pytest.raises(EventParseError):
        parse_command(line)


# =============================================================================
# DISPATCH TESTS
# =============================================================================


@pytest.mark.unit
def test_dispatch_session_updates_store(state_store, orchestrator_spy):
    """Test session changes go to the store, not the orchestrator."""
    dispatcher = EventDispatcher(state_store, orchestrator_spy)

    assert dispatcher.dispatch(SessionChanged("Group A")) is True

    assert state_store.get().session_name == "Group A"
    assert orchestrator_spy.calls == []


@pytest.mark.unit
def test_dispatch_routes_to_orchestrator(state_store, orchestrator_spy):
    """Test attempt events reach the matching handler."""
    dispatcher = EventDispatcher(state_store, orchestrator_spy)

    dispatcher.dispatch(AttemptStart("Jane Doe", LiftType.SNATCH, 1, 1000))
    dispatcher.dispatch(DecisionGiven(9000))
    dispatcher.dispatch(ForceStop())
    dispatcher.dispatch(StatusRequest())

    assert orchestrator_spy.calls == [
        ("on_attempt_start", ("Jane Doe", LiftType.SNATCH, 1, 1000)),
        ("on_decision", (9000,)),
        ("force_stop", ()),
        ("get_status", ()),
    ]


@pytest.mark.unit
def test_dispatch_returns_handler_result(state_store, orchestrator_spy):
    """Test rejected events are reported as such."""
    orchestrator_spy.accept = False
    dispatcher = EventDispatcher(state_store, orchestrator_spy)

    assert dispatcher.dispatch(DecisionGiven(9000)) is False


@pytest.mark.unit
def test_dispatch_unknown_event(state_store, orchestrator_spy):
    """Test unknown objects are ignored."""
    dispatcher = EventDispatcher(state_store, orchestrator_spy)

    assert dispatcher.dispatch("DECISION") is False


# =============================================================================
# CONTROL FILE TESTS
# =============================================================================


@pytest.mark.unit
def test_control_file_absent(temp_dir, state_store, orchestrator_spy):
    """Test nothing happens when no command is waiting."""
    source = ControlFileEventSource(
        EventDispatcher(state_store, orchestrator_spy),
        temp_dir / "control.cmd",
    )

    assert source.poll_once() is False


@pytest.mark.unit
def test_control_file_processes_all_lines(temp_dir, state_store, orchestrator_spy):
    """Test every line is dispatched in order and the file removed."""
    control_file = temp_dir / "control.cmd"
    control_file.write_text(
        "SESSION Group A\n"
        "START 'Jane Doe' SNATCH 1 1000\n"
        "\n"
        "DECISION 9000\n",
    )
    source = ControlFileEventSource(
        EventDispatcher(state_store, orchestrator_spy),
        control_file,
    )

    assert source.poll_once() is True

    assert not control_file.exists()
    assert state_store.get().session_name == "Group A"
    assert [name for name, _ in orchestrator_spy.calls] == [
        "on_attempt_start",
        "on_decision",
    ]


@pytest.mark.unit
def test_control_file_skips_bad_lines(temp_dir, state_store, orchestrator_spy):
    """Test an invalid line does not block the following ones."""
    control_file = temp_dir / "control.cmd"
    control_file.write_text("BOGUS\nFORCESTOP\n")
    source = ControlFileEventSource(
        EventDispatcher(state_store, orchestrator_spy),
        control_file,
    )

    source.poll_once()

    assert orchestrator_spy.calls == [("force_stop", ())]


@pytest.mark.unit
def test_control_file_survives_handler_error(temp_dir, state_store, orchestrator_spy):
    """Test an exception in a handler is logged, not raised."""
    control_file = temp_dir / "control.cmd"
    control_file.write_text("DECISION 1\nFORCESTOP\n")

    def explode(stop_ms):
        raise RuntimeError("boom")

    orchestrator_spy.on_decision = explode
    source = ControlFileEventSource(
        EventDispatcher(state_store, orchestrator_spy),
        control_file,
    )

    assert source.poll_once() is True
    assert orchestrator_spy.calls == [("force_stop", ())]


@pytest.mark.unit_integration
def test_control_file_poller_thread(temp_dir, state_store, orchestrator_spy):
    """Test the background poller picks up a command."""
    control_file = temp_dir / "control.cmd"
    source = ControlFileEventSource(
        EventDispatcher(state_store, orchestrator_spy),
        control_file,
        poll_interval=0.01,
    )
    source.start()
    try:
        # Atomic rename so the poller never sees a half-written file
        pending = temp_dir / "control.tmp"
        pending.write_text("FORCESTOP\n")
        pending.rename(control_file)
        for _ in range(200):
            if orchestrator_spy.calls:
                break
            time.sleep(0.01)
    finally:
        source.stop()

    assert orchestrator_spy.calls == [("force_stop", ())]

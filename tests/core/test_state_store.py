"""
State Store Tests

Tests for AttemptState and StateStore showing:
- Lift type parsing
- Descriptor formatting
- Atomic updates and validation
- Snapshot isolation
- Concurrent access

To run:
    pytest tests/core/test_state_store.py -v
"""

import threading

import pytest

from core.state_store import AttemptState, LiftType, StateStore

# =============================================================================
# LIFT TYPE TESTS
# =============================================================================


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [
        ("SNATCH", LiftType.SNATCH),
        ("snatch", LiftType.SNATCH),
        (" CleanJerk ", LiftType.CLEANJERK),
        (LiftType.CLEANJERK, LiftType.CLEANJERK),
    ],
)
def test_lift_type_parse(value, expected):
    """Test lift keys are accepted in any case."""
    assert LiftType.parse(value) is expected


@pytest.mark.unit
def test_lift_type_parse_unknown():
    """Test unknown lift keys are rejected."""
    with pytest.raises(ValueError, match="Unknown lift type"):
        LiftType.parse("DEADLIFT")


# =============================================================================
# ATTEMPT STATE TESTS
# =============================================================================


@pytest.mark.unit
def test_attempt_state_defaults():
    """Test a fresh state has no attempt in flight."""
    state = AttemptState()

    assert state.athlete == ""
    assert state.session_name == ""
    assert state.start_time_ms == 0
    assert state.stop_time_ms == 0
    assert state.has_valid_start is False


@pytest.mark.unit
def test_attempt_state_descriptor():
    """Test descriptor uses spaces and the lift key."""
    state = AttemptState(
        athlete="Jane_Doe",
        lift_type=LiftType.CLEANJERK,
        attempt_number=2,
    )

    assert state.descriptor == "Jane Doe - CLEANJERK attempt 2"


@pytest.mark.unit
def test_attempt_state_is_immutable():
    """Test snapshots cannot be modified."""
    state = AttemptState(athlete="Jane Doe")

    with pytest.raises(AttributeError):
        state.athlete = "John Roe"


# =============================================================================
# STORE TESTS
# =============================================================================


@pytest.mark.unit
def test_begin_attempt_clears_stop(state_store):
    """Test a new attempt never inherits the previous stop time."""
    state_store.begin_attempt("Jane Doe", "SNATCH", 1, 1000)
    state_store.record_stop(9000)

    snapshot = state_store.begin_attempt("Jane Doe", "SNATCH", 2, 20000)

    assert snapshot.attempt_number == 2
    assert snapshot.start_time_ms == 20000
    assert snapshot.stop_time_ms == 0


@pytest.mark.unit
def test_begin_attempt_keeps_session(state_store):
    """Test the session survives attempt changes."""
    state_store.set_session("Group A")

    snapshot = state_store.begin_attempt("Jane Doe", "snatch", 1, 1000)

    assert snapshot.session_name == "Group A"
    assert snapshot.lift_type is LiftType.SNATCH


@pytest.mark.unit
def test_begin_attempt_negative_start_clamped(state_store):
    """Test a negative start is stored as 'no valid start'."""
    snapshot = state_store.begin_attempt("Jane Doe", "SNATCH", 1, -5)

    assert snapshot.start_time_ms == 0
    assert snapshot.has_valid_start is False


@pytest.mark.unit
def test_set_session_strips_whitespace(state_store):
    """Test session names are trimmed."""
    assert state_store.set_session("  Group B ").session_name == "Group B"
    assert state_store.set_session(None).session_name == ""


@pytest.mark.unit
def test_update_rejects_unknown_field(state_store):
    """Test typos in field names fail loudly."""
    with pytest.raises(AttributeError):
        state_store.update(athelete="Jane Doe")


@pytest.mark.unit
def test_update_rejects_invalid_attempt_number(state_store):
    """Test attempt numbers start at 1."""
    with pytest.raises(ValueError):
        state_store.update(attempt_number=0)

    assert state_store.get().attempt_number == 1


@pytest.mark.unit
def test_snapshot_not_affected_by_later_updates(state_store):
    """Test an earlier snapshot keeps its values."""
    state_store.begin_attempt("Jane Doe", "SNATCH", 1, 1000)
    snapshot = state_store.get()

    state_store.begin_attempt("John Roe", "CLEANJERK", 3, 5000)

    assert snapshot.athlete == "Jane Doe"
    assert snapshot.attempt_number == 1


@pytest.mark.unit
def test_concurrent_updates_are_atomic(state_store):
    """Test readers never observe a half-applied attempt."""
    errors = []

    def writer(index):
        for i in range(200):
            state_store.begin_attempt(f"Athlete{index}", "SNATCH", index, 1000 * index)

    def reader():
        for _ in range(500):
            snapshot = state_store.get()
            if snapshot.athlete and snapshot.athlete != f"Athlete{snapshot.attempt_number}":
                errors.append(snapshot)

    threads = [threading.Thread(target=writer, args=(n,)) for n in (1, 2, 3)]
    threads.append(threading.Thread(target=reader))
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []


@pytest.mark.unit
def test_store_initial_state():
    """Test the store starts empty or from a given snapshot."""
    assert StateStore().get() == AttemptState()

    initial = AttemptState(athlete="Jane Doe", session_name="Group A")
    assert StateStore(initial).get() is initial

"""
Retry Tests

Tests for RetryPolicy and call_with_retry.

To run:
    pytest tests/core/test_retry.py -v
"""

import pytest

from core.retry import RetryPolicy, call_with_retry


class Flaky:
    """Callable failing a fixed number of times before succeeding."""

    def __init__(self, failures, error=OSError):
        self.failures = failures
        self.error = error
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error(f"failure {self.calls}")
        return "done"


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def policy(sleeps):
    return RetryPolicy(max_attempts=5, delay_seconds=1.0, sleep=sleeps.append)


# =============================================================================
# POLICY TESTS
# =============================================================================


@pytest.mark.unit
def test_policy_defaults():
    """Test the default policy is five attempts one second apart."""
    policy = RetryPolicy()

    assert policy.max_attempts == 5
    assert policy.delay_seconds == 1.0


@pytest.mark.unit
@pytest.mark.parametrize("kwargs", [{"max_attempts": 0}, {"delay_seconds": -1}])
def test_policy_rejects_invalid_values(kwargs):
    """Test invalid policies are rejected."""
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)


# =============================================================================
# CALL TESTS
# =============================================================================


@pytest.mark.unit
def test_success_first_try(policy, sleeps):
    """Test no delay when the first attempt succeeds."""
    func = Flaky(0)

    assert call_with_retry(func, policy) == "done"
    assert func.calls == 1
    assert sleeps == []


@pytest.mark.unit
def test_success_after_failures(policy, sleeps):
    """Test transient failures are retried with the fixed delay."""
    func = Flaky(2)

    assert call_with_retry(func, policy, retry_on=(OSError,)) == "done"
    assert func.calls == 3
    assert sleeps == [1.0, 1.0]


@pytest.mark.unit
def test_exhausted_raises_last_error(policy, sleeps):
    """Test the last error propagates after max_attempts."""
    func = Flaky(10)

    with pytest.raises(OSError, match="failure 5"):
        call_with_retry(func, policy, retry_on=(OSError,))

    assert func.calls == 5
    # No pause after the final attempt
    assert len(sleeps) == 4


@pytest.mark.unit
def test_other_errors_not_retried(policy, sleeps):
    """Test exceptions outside retry_on propagate immediately."""
    func = Flaky(3, error=KeyError)

    with pytest.raises(KeyError):
        call_with_retry(func, policy, retry_on=(OSError,))

    assert func.calls == 1
    assert sleeps == []


@pytest.mark.unit
def test_on_retry_hook(policy):
    """Test the hook sees each retried attempt."""
    seen = []
    func = Flaky(2)

    call_with_retry(
        func,
        policy,
        on_retry=lambda attempt, error: seen.append((attempt, str(error))),
    )

    assert seen == [(1, "failure 1"), (2, "failure 2")]


@pytest.mark.unit
def test_single_attempt_policy(sleeps):
    """Test max_attempts=1 means no retry at all."""
    policy = RetryPolicy(max_attempts=1, delay_seconds=1.0, sleep=sleeps.append)
    func = Flaky(1)

    with pytest.raises(OSError):
        call_with_retry(func, policy)

    assert func.calls == 1
    assert sleeps == []

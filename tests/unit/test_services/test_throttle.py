"""Unit tests for the per-claim attempt throttle."""
import pytest

from attendance.core.exceptions import TooManyAttemptsError
from attendance.models import VerificationOutcome
from attendance.services.throttle import AttemptThrottle


@pytest.mark.unit
class TestAttemptThrottle:
    """Test attempt counting and lockout."""

    def test_fresh_throttle_allows_three_tries(self):
        throttle = AttemptThrottle()

        assert throttle.remaining == 3
        assert throttle.locked_out is False
        throttle.ensure_can_attempt()

    def test_first_two_failures_allow_retry(self):
        throttle = AttemptThrottle()

        throttle.record(VerificationOutcome.FAILURE)
        assert throttle.remaining == 2
        throttle.ensure_can_attempt()

        throttle.record(VerificationOutcome.FAILURE)
        assert throttle.remaining == 1
        throttle.ensure_can_attempt()

    def test_third_failure_locks_out(self):
        """The third failed try is the last one; a fourth is refused."""
        throttle = AttemptThrottle()
        for _ in range(3):
            throttle.ensure_can_attempt()
            throttle.record(VerificationOutcome.FAILURE)

        assert throttle.locked_out is True
        assert throttle.remaining == 0
        with pytest.raises(TooManyAttemptsError) as exc_info:
            throttle.ensure_can_attempt()

        assert exc_info.value.redirect_to == "/"
        assert exc_info.value.redirect_after_seconds == 3
        assert exc_info.value.status_code == 429

    def test_success_is_not_counted(self):
        throttle = AttemptThrottle()
        throttle.record(VerificationOutcome.FAILURE)
        throttle.record(VerificationOutcome.SUCCESS)

        assert throttle.failures == 1

    def test_custom_limits(self):
        throttle = AttemptThrottle(max_attempts=1, redirect_to="/bye", redirect_after_seconds=9)
        throttle.record(VerificationOutcome.FAILURE)

        with pytest.raises(TooManyAttemptsError) as exc_info:
            throttle.ensure_can_attempt()
        assert exc_info.value.redirect_to == "/bye"
        assert exc_info.value.redirect_after_seconds == 9


@pytest.mark.unit
class TestThrottleCookie:
    """Test the cookie form of the counter."""

    def test_round_trip(self):
        throttle = AttemptThrottle(failures=2)
        restored = AttemptThrottle.from_cookie(throttle.to_cookie())

        assert restored.failures == 2
        assert restored.remaining == 1

    @pytest.mark.parametrize("value", [None, "", "abc", "-4", "1.5"])
    def test_unreadable_values_count_as_zero(self, value):
        assert AttemptThrottle.from_cookie(value).failures == 0

    def test_kwargs_are_passed_through(self):
        throttle = AttemptThrottle.from_cookie("3", max_attempts=5)

        assert throttle.max_attempts == 5
        assert throttle.locked_out is False

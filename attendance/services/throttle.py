"""Per-claim verification attempt throttle.

This is caller-side policy for the student-facing flow. The counter lives
with the client (a cookie per claim) and is never written to the state
blob, so clearing it resets the count.
"""
from dataclasses import dataclass

from attendance.core.constants import (
    LOCKOUT_REDIRECT_PATH,
    LOCKOUT_REDIRECT_SECONDS,
    MAX_VERIFICATION_ATTEMPTS,
)
from attendance.core.exceptions import TooManyAttemptsError
from attendance.models import VerificationOutcome


@dataclass
class AttemptThrottle:
    """
    Counts failed verifications for one claim.

    ``max_attempts`` is the total number of tries, so with the default of 3
    the first two failures allow a retry and the third locks the student out.
    """

    max_attempts: int = MAX_VERIFICATION_ATTEMPTS
    failures: int = 0
    redirect_to: str = LOCKOUT_REDIRECT_PATH
    redirect_after_seconds: int = LOCKOUT_REDIRECT_SECONDS

    @property
    def remaining(self) -> int:
        return max(0, self.max_attempts - self.failures)

    @property
    def locked_out(self) -> bool:
        return self.failures >= self.max_attempts

    def ensure_can_attempt(self) -> None:
        if self.locked_out:
            raise TooManyAttemptsError(
                redirect_to=self.redirect_to,
                redirect_after_seconds=self.redirect_after_seconds,
            )

    def record(self, outcome: VerificationOutcome) -> None:
        if outcome is VerificationOutcome.FAILURE:
            self.failures += 1

    @classmethod
    def from_cookie(cls, value: str, **kwargs) -> "AttemptThrottle":
        """Rebuild from a stored failure count; unreadable values count as zero."""
        try:
            failures = max(0, int(value))
        except (TypeError, ValueError):
            failures = 0
        return cls(failures=failures, **kwargs)

    def to_cookie(self) -> str:
        return str(self.failures)

"""Domain errors raised by the attendance core.

Every error here is recoverable by the user except ``PersistenceError``,
which means the durable record could not be read or written.
"""
from typing import Optional

from attendance.core.constants import LOCKOUT_REDIRECT_PATH, LOCKOUT_REDIRECT_SECONDS


class AttendanceError(Exception):
    """Base class for attendance errors."""

    status_code = 400
    code = "attendance_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AttendanceError):
    """Unknown session or claim id."""

    status_code = 404
    code = "not_found"


class InactiveSessionError(AttendanceError):
    """Claim or OTP action against an ended session."""

    status_code = 409
    code = "inactive_session"


class ValidationError(AttendanceError):
    """A required field is empty or malformed."""

    status_code = 400
    code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class TooManyAttemptsError(AttendanceError):
    """The student used every verification attempt for a claim."""

    status_code = 429
    code = "too_many_attempts"

    def __init__(
        self,
        message: str = "You've reached the maximum number of attempts.",
        redirect_to: str = LOCKOUT_REDIRECT_PATH,
        redirect_after_seconds: int = LOCKOUT_REDIRECT_SECONDS,
    ):
        super().__init__(message)
        self.redirect_to = redirect_to
        self.redirect_after_seconds = redirect_after_seconds


class PersistenceError(AttendanceError):
    """The state blob could not be loaded or saved."""

    status_code = 500
    code = "persistence_error"


class IncompatibleStateError(PersistenceError):
    """The stored blob was written with an unknown schema version."""

    code = "incompatible_state"

"""Domain entities for sessions, claims and the persisted snapshot.

Entities are frozen: the registry and ledger replace a record with an
updated copy instead of mutating fields one by one, so the OTP triple of a
session is always written in a single step.
"""
import enum
from datetime import datetime, timedelta
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from attendance.core.constants import STATE_SCHEMA_VERSION, STATUS_PENDING, STATUS_VERIFIED


class OneTimeCode(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    issued_at: datetime
    expires_at: datetime

    @property
    def validity(self) -> timedelta:
        return self.expires_at - self.issued_at


class AttendanceSession(BaseModel):
    """One instructor-declared attendance window."""

    model_config = ConfigDict(frozen=True)

    id: str
    teacher_id: str
    created_at: datetime
    join_link: str
    otp: Optional[str] = None
    otp_generated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    is_active: bool = True

    @model_validator(mode="after")
    def check_otp_fields(self) -> "AttendanceSession":
        present = [self.otp is not None, self.otp_generated_at is not None, self.expires_at is not None]
        if any(present) and not all(present):
            raise ValueError("otp, otp_generated_at and expires_at must be set together")
        return self

    def with_otp(self, code: OneTimeCode) -> "AttendanceSession":
        return self.model_copy(update={
            "otp": code.code,
            "otp_generated_at": code.issued_at,
            "expires_at": code.expires_at,
        })

    def ended(self) -> "AttendanceSession":
        return self.model_copy(update={"is_active": False})


class AttendanceClaim(BaseModel):
    """A student's self-reported presence against one session."""

    model_config = ConfigDict(frozen=True)

    id: str
    session_id: str
    student_name: str
    roll_number: str
    student_id: str
    timestamp: datetime
    verified: bool = False

    @property
    def status(self) -> str:
        return STATUS_VERIFIED if self.verified else STATUS_PENDING


class VerificationOutcome(str, enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class StateSnapshot(BaseModel):
    """Everything written to the named state blob."""

    schema_version: int = STATE_SCHEMA_VERSION
    sessions: List[AttendanceSession] = []
    claims: List[AttendanceClaim] = []

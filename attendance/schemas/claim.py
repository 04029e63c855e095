"""Attendance claim schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from attendance.core.sanitization import (
    MAX_NAME_LENGTH,
    MAX_ROLL_NUMBER_LENGTH,
    MAX_STUDENT_ID_LENGTH,
    validate_otp_format,
)
from attendance.models import AttendanceClaim


class ClaimCreate(BaseModel):
    # Emptiness and markup are checked by the ledger so the error names the field
    name: str = Field(..., max_length=MAX_NAME_LENGTH)
    roll_number: str = Field(..., max_length=MAX_ROLL_NUMBER_LENGTH)
    student_id: str = Field(..., max_length=MAX_STUDENT_ID_LENGTH)


class ClaimResponse(BaseModel):
    id: str
    session_id: str
    student_name: str
    roll_number: str
    student_id: str
    timestamp: datetime
    verified: bool
    status: str

    @classmethod
    def build(cls, claim: AttendanceClaim) -> "ClaimResponse":
        return cls(
            id=claim.id,
            session_id=claim.session_id,
            student_name=claim.student_name,
            roll_number=claim.roll_number,
            student_id=claim.student_id,
            timestamp=claim.timestamp,
            verified=claim.verified,
            status=claim.status,
        )


class VerifyRequest(BaseModel):
    otp: str = Field(..., min_length=1, max_length=20)

    @field_validator('otp')
    @classmethod
    def validate_otp_field(cls, v: str) -> str:
        """Only six-digit codes reach the ledger."""
        return validate_otp_format(v)


class VerificationResponse(BaseModel):
    verified: bool
    message: str
    failed_attempts: int
    attempts_remaining: int
    locked_out: bool = False
    redirect_to: Optional[str] = None
    redirect_after_seconds: Optional[int] = None

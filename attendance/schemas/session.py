"""Attendance session schemas."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from attendance.models import AttendanceSession
from attendance.services.ledger import AttendanceSummary
from attendance.core.utils import seconds_remaining


class SessionDetail(BaseModel):
    """Instructor view of a session, including the live code."""
    id: str
    teacher_id: str
    created_at: datetime
    join_link: str
    is_active: bool
    otp: Optional[str] = None
    otp_generated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    seconds_remaining: int = 0
    total_claims: int = 0
    verified_claims: int = 0

    @classmethod
    def build(cls, session: AttendanceSession, summary: AttendanceSummary, now: datetime) -> "SessionDetail":
        return cls(
            id=session.id,
            teacher_id=session.teacher_id,
            created_at=session.created_at,
            join_link=session.join_link,
            is_active=session.is_active,
            otp=session.otp,
            otp_generated_at=session.otp_generated_at,
            expires_at=session.expires_at,
            seconds_remaining=seconds_remaining(session.expires_at, now),
            total_claims=summary.total,
            verified_claims=summary.verified,
        )


class OtpResponse(BaseModel):
    session_id: str
    otp: str
    otp_generated_at: datetime
    expires_at: datetime
    seconds_remaining: int


class DashboardResponse(BaseModel):
    """Focused session of the instructor dashboard (None until one is opened)."""
    session: Optional[SessionDetail] = None
    sessions: List[SessionDetail] = []


class PublicSession(BaseModel):
    """What a student sees after following a join link. Never carries the code."""
    id: str
    created_at: datetime
    is_active: bool
    otp_validity_seconds: int

"""Pydantic schemas for request/response validation."""
from attendance.schemas.auth import TeacherLoginRequest, TeacherLoginResponse, TeacherProfile
from attendance.schemas.session import (
    SessionDetail,
    OtpResponse,
    DashboardResponse,
    PublicSession,
)
from attendance.schemas.claim import (
    ClaimCreate,
    ClaimResponse,
    VerifyRequest,
    VerificationResponse,
)
from attendance.schemas.common import SuccessResponse

__all__ = [
    "TeacherLoginRequest",
    "TeacherLoginResponse",
    "TeacherProfile",
    "SessionDetail",
    "OtpResponse",
    "DashboardResponse",
    "PublicSession",
    "ClaimCreate",
    "ClaimResponse",
    "VerifyRequest",
    "VerificationResponse",
    "SuccessResponse",
]
